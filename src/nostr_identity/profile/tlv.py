"""TLV codec for nprofile payloads (NIP-19).

Layout
------
A sequence of ``(type: 1 byte, length: 1 byte, value: length bytes)``
records:

====  =========  ==========================================
type  name       value
====  =========  ==========================================
0     special    the profile's 32-byte x-only public key
1     relay      a UTF-8 relay URL, 0-255 bytes
====  =========  ==========================================

The first record must be ``special`` with length 32. Every record after it
must be ``relay``.

Relays longer than 255 UTF-8 bytes are rejected on encode. On decode, one
dangling byte after the last complete record is dropped unless strict mode
is on (see :mod:`nostr_identity.config`).
"""
from __future__ import annotations

import logging
from typing import Optional

from nostr_identity.config import get_config
from nostr_identity.errors import InvalidProfileError, InvalidUtf8Error, RelayHintTooLongError
from nostr_identity.keys.backend import KeyBackend
from nostr_identity.keys.types import PublicKey
from nostr_identity.profile.model import Profile

logger = logging.getLogger(__name__)

TLV_SPECIAL: int = 0
TLV_RELAY: int = 1

_PUBKEY_LENGTH: int = 32
_HEADER_LENGTH: int = 2
_MAX_VALUE_LENGTH: int = 255


def encode_tlv(profile: Profile) -> bytes:
    """Pack *profile* into TLV bytes.

    Raises
    ------
    RelayHintTooLongError
        If a relay is more than 255 bytes when UTF-8 encoded.
    """
    tlv = bytearray([TLV_SPECIAL, _PUBKEY_LENGTH])
    tlv += profile.pubkey.as_bytes()
    for relay in profile.relays:
        encoded = relay.encode("utf-8")
        if len(encoded) > _MAX_VALUE_LENGTH:
            raise RelayHintTooLongError(relay, len(encoded))
        tlv += bytes([TLV_RELAY, len(encoded)])
        tlv += encoded
    return bytes(tlv)


def decode_tlv(
    data: bytes, *, strict: Optional[bool] = None, backend: KeyBackend | None = None
) -> Profile:
    """Unpack TLV bytes into a :class:`Profile`.

    Parameters
    ----------
    data:
        The TLV buffer.
    strict:
        Reject a dangling trailing byte instead of dropping it. Defaults to
        the process-wide :class:`~nostr_identity.config.CodecConfig`.
    backend:
        Key backend used to validate the public key.

    Raises
    ------
    InvalidProfileError
        On a wrong leading record, a truncated buffer, or a non-relay record
        after the key.
    InvalidPublicKeyError
        If the key bytes are not a valid x-only public key.
    InvalidUtf8Error
        If a relay value is not valid UTF-8.
    """
    if strict is None:
        strict = get_config().strict_tlv_trailing_bytes

    if len(data) < _HEADER_LENGTH:
        raise InvalidProfileError(f"Profile TLV is too short ({len(data)} bytes)")
    if data[0] != TLV_SPECIAL or data[1] != _PUBKEY_LENGTH:
        raise InvalidProfileError(
            f"Profile TLV must start with a public key record, found type {data[0]} "
            f"length {data[1]}"
        )
    pos = _HEADER_LENGTH + _PUBKEY_LENGTH
    if len(data) < pos:
        raise InvalidProfileError("Profile TLV public key record is truncated")

    pubkey = PublicKey.from_bytes(data[_HEADER_LENGTH:pos], backend)

    relays: list[str] = []
    while len(data) - pos >= _HEADER_LENGTH:
        record_type = data[pos]
        length = data[pos + 1]
        pos += _HEADER_LENGTH
        if record_type != TLV_RELAY:
            raise InvalidProfileError(f"Unexpected TLV record type {record_type}")
        if len(data) - pos < length:
            raise InvalidProfileError(
                f"TLV relay record claims {length} bytes but only {len(data) - pos} remain"
            )
        value = bytes(data[pos : pos + length])
        try:
            relays.append(value.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise InvalidUtf8Error(value, exc) from exc
        pos += length

    if pos < len(data):
        if strict:
            raise InvalidProfileError(f"{len(data) - pos} trailing byte(s) after last TLV record")
        logger.debug("Dropping %d trailing byte(s) after last TLV record", len(data) - pos)

    return Profile(pubkey=pubkey, relays=tuple(relays))


__all__ = ["TLV_RELAY", "TLV_SPECIAL", "decode_tlv", "encode_tlv"]
