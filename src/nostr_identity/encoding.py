"""Bech32 envelope used by NIP-19 identifiers (npub, nsec, nprofile).

Encoding
--------
1. Regroup the payload bytes into 5-bit units (zero-padded at the end).
2. Append the six-character bech32 checksum computed over the
   human-readable prefix (hrp) and the 5-bit data.
3. Assemble: ``<hrp>1<data><checksum>`` using the bech32 charset.

Only the original bech32 checksum constant is produced and accepted;
bech32m strings are rejected. Unlike segwit addresses, NIP-19 strings
are allowed to exceed 90 characters. :func:`bech32.bech32_encode` has no
length cap, but :func:`bech32.bech32_decode` enforces one, so decoding
does its own framing checks and leaves the checksum to the ``bech32``
package.
"""
from __future__ import annotations

from bech32 import CHARSET, bech32_encode, bech32_verify_checksum, convertbits

from nostr_identity.errors import EnvelopeChecksumError, EnvelopeMismatchError

_CHECKSUM_LENGTH: int = 6
_CHARSET_INVERSE: dict[str, int] = {char: index for index, char in enumerate(CHARSET)}


def encode_bech32(hrp: str, data: bytes) -> str:
    """Encode *data* as a bech32 string with human-readable prefix *hrp*.

    Parameters
    ----------
    hrp:
        Lowercase human-readable prefix such as ``"npub"``.
    data:
        Arbitrary payload bytes.

    Returns
    -------
    str
        The lowercase bech32 string.
    """
    return bech32_encode(hrp, convertbits(data, 8, 5, True))


def decode_bech32(text: str) -> tuple[str, bytes]:
    """Decode a bech32 string into its prefix and payload bytes.

    Parameters
    ----------
    text:
        A bech32 string, all lowercase or all uppercase.

    Returns
    -------
    tuple[str, bytes]
        ``(hrp, payload)`` with *hrp* lowercased.

    Raises
    ------
    EnvelopeChecksumError
        If the string is mixed case, has no separator or an empty prefix,
        contains characters outside the charset, fails the checksum, or
        carries non-zero padding bits.
    """
    if text.lower() != text and text.upper() != text:
        raise EnvelopeChecksumError(f"Mixed-case bech32 string {text!r}")
    if any(ord(char) < 33 or ord(char) > 126 for char in text):
        raise EnvelopeChecksumError("Bech32 string contains non-printable characters")

    lowered = text.lower()
    pos = lowered.rfind("1")
    if pos < 1:
        raise EnvelopeChecksumError(f"Missing bech32 separator or prefix in {text!r}")
    if pos + 1 + _CHECKSUM_LENGTH > len(lowered):
        raise EnvelopeChecksumError(f"Bech32 data part too short in {text!r}")

    hrp = lowered[:pos]
    try:
        data = [_CHARSET_INVERSE[char] for char in lowered[pos + 1 :]]
    except KeyError as exc:
        raise EnvelopeChecksumError(f"Invalid bech32 character {exc.args[0]!r}") from exc

    if not bech32_verify_checksum(hrp, data):
        raise EnvelopeChecksumError(f"Invalid bech32 checksum in {text!r}")

    payload = convertbits(data[:-_CHECKSUM_LENGTH], 5, 8, False)
    if payload is None:
        raise EnvelopeChecksumError(f"Invalid bech32 padding in {text!r}")
    return hrp, bytes(payload)


def decode_bech32_expecting(expected_hrp: str, text: str) -> bytes:
    """Decode *text* and require its prefix to equal *expected_hrp*.

    Raises
    ------
    EnvelopeChecksumError
        If the string itself cannot be decoded.
    EnvelopeMismatchError
        If the decoded prefix differs from *expected_hrp*.
    """
    hrp, payload = decode_bech32(text)
    if hrp != expected_hrp:
        raise EnvelopeMismatchError(expected_hrp, hrp)
    return payload


__all__ = ["decode_bech32", "decode_bech32_expecting", "encode_bech32"]
