"""nprofile bech32 envelope: TLV bytes wrapped with the ``nprofile`` prefix."""
from __future__ import annotations

from typing import Optional

from nostr_identity.encoding import decode_bech32_expecting, encode_bech32
from nostr_identity.keys.backend import KeyBackend
from nostr_identity.profile.model import Profile
from nostr_identity.profile.tlv import decode_tlv, encode_tlv

NPROFILE_PREFIX: str = "nprofile"


def encode_profile(profile: Profile) -> str:
    """Encode *profile* as an ``nprofile1…`` string.

    Raises
    ------
    RelayHintTooLongError
        If a relay hint does not fit in a TLV record.
    """
    return encode_bech32(NPROFILE_PREFIX, encode_tlv(profile))


def decode_profile(
    value: str, *, strict: Optional[bool] = None, backend: KeyBackend | None = None
) -> Profile:
    """Decode an ``nprofile1…`` string.

    Raises
    ------
    EnvelopeChecksumError
        If the bech32 framing or checksum is invalid.
    EnvelopeMismatchError
        If the prefix is not ``nprofile``.
    InvalidProfileError, InvalidPublicKeyError, InvalidUtf8Error
        If the TLV payload is malformed.
    """
    tlv = decode_bech32_expecting(NPROFILE_PREFIX, value)
    return decode_tlv(tlv, strict=strict, backend=backend)


__all__ = ["NPROFILE_PREFIX", "decode_profile", "encode_profile"]
