"""nostr-identity: NIP-26 delegation grants and NIP-19 nprofile identifiers.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import nostr_identity
>>> nostr_identity.__version__
'0.1.0'

Quick start
-----------
::

    from nostr_identity import (
        # Keys
        PrivateKey, PublicKey, Signature,
        # Delegation
        DelegationConditions, DelegationTag, check_delegation,
        # Profiles
        Profile, encode_profile, decode_profile,
    )
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Configuration and errors
# ------------------------------------------------------------------
from nostr_identity.config import CodecConfig, get_config, set_config
from nostr_identity.errors import (
    Bech32Error,
    EnvelopeChecksumError,
    EnvelopeMismatchError,
    InvalidDelegationTagError,
    InvalidKeyError,
    InvalidPrivateKeyError,
    InvalidProfileError,
    InvalidPublicKeyError,
    InvalidSignatureError,
    InvalidUtf8Error,
    MalformedNumberError,
    NostrIdentityError,
    RelayHintTooLongError,
    SignatureError,
    SigningError,
    UnknownConditionError,
    VerificationError,
)

# ------------------------------------------------------------------
# Keys subsystem
# ------------------------------------------------------------------
from nostr_identity.keys import (
    KeyBackend,
    PrivateKey,
    PublicKey,
    SchnorrKeyBackend,
    Signature,
    get_default_backend,
    set_default_backend,
)

# ------------------------------------------------------------------
# Delegation subsystem
# ------------------------------------------------------------------
from nostr_identity.delegation import (
    DelegatedBy,
    DelegationConditions,
    DelegationTag,
    EventDelegation,
    InvalidDelegation,
    NotDelegated,
    build_signing_payload,
    check_delegation,
    generate_signature,
    parse_conditions,
    serialize_conditions,
    verify_signature,
)

# ------------------------------------------------------------------
# Profile subsystem
# ------------------------------------------------------------------
from nostr_identity.profile import Profile, decode_profile, decode_tlv, encode_profile, encode_tlv

__all__ = [
    # version
    "__version__",
    # config
    "CodecConfig",
    "get_config",
    "set_config",
    # errors
    "Bech32Error",
    "EnvelopeChecksumError",
    "EnvelopeMismatchError",
    "InvalidDelegationTagError",
    "InvalidKeyError",
    "InvalidPrivateKeyError",
    "InvalidProfileError",
    "InvalidPublicKeyError",
    "InvalidSignatureError",
    "InvalidUtf8Error",
    "MalformedNumberError",
    "NostrIdentityError",
    "RelayHintTooLongError",
    "SignatureError",
    "SigningError",
    "UnknownConditionError",
    "VerificationError",
    # keys
    "KeyBackend",
    "PrivateKey",
    "PublicKey",
    "SchnorrKeyBackend",
    "Signature",
    "get_default_backend",
    "set_default_backend",
    # delegation
    "DelegatedBy",
    "DelegationConditions",
    "DelegationTag",
    "EventDelegation",
    "InvalidDelegation",
    "NotDelegated",
    "build_signing_payload",
    "check_delegation",
    "generate_signature",
    "parse_conditions",
    "serialize_conditions",
    "verify_signature",
    # profiles
    "Profile",
    "decode_profile",
    "decode_tlv",
    "encode_profile",
    "encode_tlv",
]
