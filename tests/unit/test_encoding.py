"""Tests for nostr_identity.encoding: the bech32 envelope."""
from __future__ import annotations

import pytest
from bech32 import CHARSET, bech32_encode, bech32_hrp_expand, bech32_polymod

from vectors import NIP19_NPROFILE, NIP19_NPUB, NIP19_PUBKEY_HEX
from nostr_identity.encoding import (
    decode_bech32,
    decode_bech32_expecting,
    encode_bech32,
)
from nostr_identity.errors import Bech32Error, EnvelopeChecksumError, EnvelopeMismatchError


def _swap_last_char(text: str) -> str:
    last = text[-1]
    replacement = "q" if last != "q" else "p"
    return text[:-1] + replacement


class TestEncode:
    def test_npub_vector(self) -> None:
        assert encode_bech32("npub", bytes.fromhex(NIP19_PUBKEY_HEX)) == NIP19_NPUB

    def test_empty_payload(self) -> None:
        encoded = encode_bech32("test", b"")
        assert encoded.startswith("test1")
        assert decode_bech32(encoded) == ("test", b"")

    def test_long_payload_has_no_length_cap(self) -> None:
        _, payload = decode_bech32(NIP19_NPROFILE)
        encoded = encode_bech32("nprofile", payload)
        assert len(encoded) > 90
        assert encoded == NIP19_NPROFILE


class TestDecode:
    def test_decode_npub(self) -> None:
        assert decode_bech32(NIP19_NPUB) == ("npub", bytes.fromhex(NIP19_PUBKEY_HEX))

    def test_longer_than_90_characters(self) -> None:
        assert len(NIP19_NPROFILE) > 90
        hrp, payload = decode_bech32(NIP19_NPROFILE)
        assert hrp == "nprofile"
        assert payload[:2] == b"\x00\x20"

    def test_uppercase_accepted(self) -> None:
        assert decode_bech32(NIP19_NPUB.upper()) == decode_bech32(NIP19_NPUB)

    def test_mixed_case_rejected(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32("Npub" + NIP19_NPUB[4:])

    def test_bad_checksum_rejected(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32(_swap_last_char(NIP19_NPUB))

    def test_missing_separator(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32("npubqqqqqqqqqq")

    def test_empty_prefix(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32("1qqqqqqqq")

    def test_short_data_part(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32("npub1qqq")

    def test_invalid_character(self) -> None:
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32("npub1bqqqqqqqq")

    def test_nonzero_padding_rejected(self) -> None:
        text = bech32_encode("nprofile", [31])
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32(text)

    def test_bech32m_checksum_rejected(self) -> None:
        data = [0, 0]
        values = bech32_hrp_expand("npub") + data
        polymod = bech32_polymod(values + [0] * 6) ^ 0x2BC830A3
        checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
        text = "npub1" + "".join(CHARSET[d] for d in data + checksum)
        with pytest.raises(EnvelopeChecksumError):
            decode_bech32(text)


class TestDecodeExpecting:
    def test_matching_prefix(self) -> None:
        assert decode_bech32_expecting("npub", NIP19_NPUB) == bytes.fromhex(NIP19_PUBKEY_HEX)

    def test_mismatch_carries_both_prefixes(self) -> None:
        with pytest.raises(EnvelopeMismatchError) as exc_info:
            decode_bech32_expecting("nprofile", NIP19_NPUB)
        assert exc_info.value.expected == "nprofile"
        assert exc_info.value.actual == "npub"
        assert "nprofile" in str(exc_info.value) and "npub" in str(exc_info.value)

    def test_errors_share_base(self) -> None:
        assert issubclass(EnvelopeMismatchError, Bech32Error)
        assert issubclass(EnvelopeChecksumError, Bech32Error)
