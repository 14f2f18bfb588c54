"""Tests for nostr_identity.keys: backends and key value types."""
from __future__ import annotations

import pytest

from vectors import (
    NIP19_NPUB,
    NIP19_NSEC,
    NIP19_PRIVKEY_HEX,
    NIP19_PUBKEY_HEX,
    OFF_CURVE_PUBKEY_HEX,
    FakeBackend,
)
from nostr_identity.errors import (
    EnvelopeMismatchError,
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidSignatureError,
)
from nostr_identity.keys import (
    PrivateKey,
    PublicKey,
    SchnorrKeyBackend,
    Signature,
    get_default_backend,
    set_default_backend,
)


# ---------------------------------------------------------------------------
# SchnorrKeyBackend
# ---------------------------------------------------------------------------


class TestSchnorrKeyBackend:
    def test_generate_private_key_is_32_bytes(self) -> None:
        backend = SchnorrKeyBackend()
        assert len(backend.generate_private_key()) == 32

    def test_generate_unique(self) -> None:
        backend = SchnorrKeyBackend()
        assert backend.generate_private_key() != backend.generate_private_key()

    def test_sign_and_verify(self) -> None:
        backend = SchnorrKeyBackend()
        secret = backend.generate_private_key()
        public = backend.derive_public_key(secret)
        signature = backend.sign(secret, b"payload")
        assert len(signature) == 64
        assert backend.verify(public, b"payload", signature) is True

    def test_verify_wrong_message(self) -> None:
        backend = SchnorrKeyBackend()
        secret = backend.generate_private_key()
        signature = backend.sign(secret, b"payload")
        assert backend.verify(backend.derive_public_key(secret), b"other", signature) is False

    def test_verify_short_signature_is_false(self) -> None:
        backend = SchnorrKeyBackend()
        public = backend.derive_public_key(backend.generate_private_key())
        assert backend.verify(public, b"payload", b"\x00" * 10) is False

    def test_zero_secret_rejected(self) -> None:
        with pytest.raises(InvalidPrivateKeyError):
            SchnorrKeyBackend().derive_public_key(b"\x00" * 32)

    def test_wrong_length_secret_rejected(self) -> None:
        with pytest.raises(InvalidPrivateKeyError):
            SchnorrKeyBackend().sign(b"\x01" * 31, b"payload")

    def test_off_curve_public_key_rejected(self) -> None:
        with pytest.raises(InvalidPublicKeyError):
            SchnorrKeyBackend().validate_public_key(bytes.fromhex(OFF_CURVE_PUBKEY_HEX))


class TestDefaultBackend:
    def test_default_is_schnorr(self) -> None:
        assert isinstance(get_default_backend(), SchnorrKeyBackend)

    def test_default_is_cached(self) -> None:
        assert get_default_backend() is get_default_backend()

    def test_set_default_backend(self, fake_backend: FakeBackend) -> None:
        set_default_backend(fake_backend)
        assert get_default_backend() is fake_backend
        set_default_backend(None)
        assert isinstance(get_default_backend(), SchnorrKeyBackend)


# ---------------------------------------------------------------------------
# PublicKey
# ---------------------------------------------------------------------------


class TestPublicKey:
    def test_hex_round_trip(self) -> None:
        key = PublicKey.from_hex(NIP19_PUBKEY_HEX)
        assert key.as_hex_string() == NIP19_PUBKEY_HEX
        assert str(key) == NIP19_PUBKEY_HEX

    def test_uppercase_hex_accepted_and_lowercased(self) -> None:
        assert PublicKey.from_hex(NIP19_PUBKEY_HEX.upper()).as_hex_string() == NIP19_PUBKEY_HEX

    def test_npub_known_vector(self) -> None:
        assert PublicKey.from_hex(NIP19_PUBKEY_HEX).as_bech32_string() == NIP19_NPUB

    def test_npub_decode(self) -> None:
        assert PublicKey.from_bech32(NIP19_NPUB).as_hex_string() == NIP19_PUBKEY_HEX

    def test_nsec_is_not_npub(self) -> None:
        with pytest.raises(EnvelopeMismatchError):
            PublicKey.from_bech32(NIP19_NSEC)

    @pytest.mark.parametrize("value", ["", "abc", NIP19_PUBKEY_HEX[:-2], NIP19_PUBKEY_HEX + "00"])
    def test_wrong_length_hex(self, value: str) -> None:
        with pytest.raises(InvalidPublicKeyError):
            PublicKey.from_hex(value)

    def test_non_hex_rejected(self) -> None:
        with pytest.raises(InvalidPublicKeyError):
            PublicKey.from_hex("g" * 64)

    def test_whitespace_rejected(self) -> None:
        with pytest.raises(InvalidPublicKeyError):
            PublicKey.from_hex(" " + NIP19_PUBKEY_HEX[1:])

    def test_off_curve_rejected(self) -> None:
        with pytest.raises(InvalidPublicKeyError):
            PublicKey.from_hex(OFF_CURVE_PUBKEY_HEX)

    def test_direct_construction_checks_length(self) -> None:
        with pytest.raises(InvalidPublicKeyError):
            PublicKey(b"\x01" * 33)


# ---------------------------------------------------------------------------
# PrivateKey
# ---------------------------------------------------------------------------


class TestPrivateKey:
    def test_nsec_known_vector(self) -> None:
        assert PrivateKey.from_hex(NIP19_PRIVKEY_HEX).as_bech32_string() == NIP19_NSEC

    def test_nsec_decode(self) -> None:
        assert PrivateKey.from_bech32(NIP19_NSEC).as_hex_string() == NIP19_PRIVKEY_HEX

    def test_repr_hides_secret(self) -> None:
        key = PrivateKey.from_hex(NIP19_PRIVKEY_HEX)
        assert NIP19_PRIVKEY_HEX not in repr(key)

    def test_sign_verifies_with_public_key(self) -> None:
        key = PrivateKey.generate()
        signature = key.sign(b"hello")
        assert key.public_key().verify(b"hello", signature) is True
        assert key.public_key().verify(b"bye", signature) is False

    def test_invalid_hex(self) -> None:
        with pytest.raises(InvalidPrivateKeyError):
            PrivateKey.from_hex("00")

    def test_zero_scalar_rejected(self) -> None:
        with pytest.raises(InvalidPrivateKeyError):
            PrivateKey.from_hex("00" * 32)

    def test_generate_with_backend(self, fake_backend: FakeBackend) -> None:
        key = PrivateKey.generate(fake_backend)
        assert key.backend is fake_backend
        assert key.public_key() == PublicKey(fake_backend.derive_public_key(key.raw))


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------


class TestSignature:
    def test_hex_round_trip(self) -> None:
        value = "ab" * 64
        assert Signature.from_hex(value).as_hex_string() == value

    def test_wrong_length(self) -> None:
        with pytest.raises(InvalidSignatureError):
            Signature.from_hex("ab" * 63)
        with pytest.raises(InvalidSignatureError):
            Signature(b"\x00" * 65)
