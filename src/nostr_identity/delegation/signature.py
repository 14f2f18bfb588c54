"""Delegation signing protocol (NIP-26).

A delegator authorises a delegatee by signing the UTF-8 string::

    nostr:delegation:<delegatee-pubkey-hex>:<conditions>

with its own private key. Verification rebuilds the same string from the
*delegatee* key and checks the signature against the *delegator* key. The
two keys play different roles and are never interchangeable: the grant
text names the delegatee, the signature proves the delegator.

All functions here are pure apart from the call into the key backend, and
are safe to use from multiple threads.
"""
from __future__ import annotations

import logging
from typing import Union

from nostr_identity.delegation.conditions import DelegationConditions
from nostr_identity.errors import InvalidPublicKeyError, SigningError, VerificationError
from nostr_identity.keys.backend import KeyBackend, get_default_backend
from nostr_identity.keys.types import PrivateKey, PublicKey, Signature

logger = logging.getLogger(__name__)

DELEGATION_PAYLOAD_PREFIX: str = "nostr:delegation:"


def build_signing_payload(
    delegatee_pubkey: Union[PublicKey, str], conditions: DelegationConditions
) -> bytes:
    """Return the exact bytes a delegation signature covers.

    Parameters
    ----------
    delegatee_pubkey:
        The delegatee's public key, or its 64-character hex form.
        Hex input is lowercased; it is not checked against the curve.
    conditions:
        The conditions being granted.

    Returns
    -------
    bytes
        ``b"nostr:delegation:<hex>:<conditions>"``.
    """
    if isinstance(delegatee_pubkey, PublicKey):
        pubkey_hex = delegatee_pubkey.as_hex_string()
    else:
        pubkey_hex = delegatee_pubkey.lower()
    text = f"{DELEGATION_PAYLOAD_PREFIX}{pubkey_hex}:{conditions.as_string()}"
    return text.encode("utf-8")


def generate_signature(
    conditions: DelegationConditions,
    delegatee_pubkey: PublicKey,
    delegator_private_key: PrivateKey,
    *,
    backend: KeyBackend | None = None,
) -> Signature:
    """Sign a delegation grant.

    Parameters
    ----------
    conditions:
        Conditions restricting the grant.
    delegatee_pubkey:
        The key being authorised to sign on the delegator's behalf.
    delegator_private_key:
        The delegator's secret key.
    backend:
        Key backend to sign with. Defaults to the key's own backend, then
        the process-wide default.

    Returns
    -------
    Signature

    Raises
    ------
    SigningError
        If the backend cannot produce a signature.
    InvalidPrivateKeyError
        If the private key is not a valid scalar.
    """
    payload = build_signing_payload(delegatee_pubkey, conditions)
    signer = backend or delegator_private_key.backend or get_default_backend()
    raw = signer.sign(delegator_private_key.raw, payload)
    try:
        signature = Signature(raw)
    except ValueError as exc:
        raise SigningError(f"Backend returned a malformed signature: {exc}") from exc
    logger.info(
        "Created delegation grant for delegatee %s with conditions %r",
        delegatee_pubkey.as_hex_string(),
        conditions.as_string(),
    )
    return signature


def verify_signature(
    conditions: DelegationConditions,
    delegator_pubkey: PublicKey,
    delegatee_pubkey: PublicKey,
    signature: Signature,
    *,
    backend: KeyBackend | None = None,
) -> None:
    """Verify a delegation grant.

    Parameters
    ----------
    conditions:
        The conditions the grant claims.
    delegator_pubkey:
        Key that is supposed to have signed the grant.
    delegatee_pubkey:
        Key named in the grant text.
    signature:
        The grant signature.
    backend:
        Key backend to verify with. Defaults to the process-wide backend.

    Raises
    ------
    VerificationError
        If the signature does not verify, with a human-readable reason.
    """
    payload = build_signing_payload(delegatee_pubkey, conditions)
    verifier = backend or get_default_backend()
    try:
        valid = verifier.verify(delegator_pubkey.as_bytes(), payload, signature.as_bytes())
    except InvalidPublicKeyError as exc:
        raise VerificationError(f"Delegator public key is invalid: {exc}") from exc
    if not valid:
        logger.warning(
            "Delegation signature by %s for delegatee %s did not verify",
            delegator_pubkey.as_hex_string(),
            delegatee_pubkey.as_hex_string(),
        )
        raise VerificationError(
            f"Delegation signature by {delegator_pubkey.as_hex_string()} is not valid "
            f"for delegatee {delegatee_pubkey.as_hex_string()} "
            f"and conditions {conditions.as_string()!r}"
        )


__all__ = [
    "DELEGATION_PAYLOAD_PREFIX",
    "build_signing_payload",
    "generate_signature",
    "verify_signature",
]
