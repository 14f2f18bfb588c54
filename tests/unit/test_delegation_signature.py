"""Tests for nostr_identity.delegation.signature: the NIP-26 signing protocol."""
from __future__ import annotations

import pytest

from vectors import (
    DELEGATEE_PUBKEY_HEX,
    DELEGATOR_PRIVKEY_HEX,
    DELEGATOR_PUBKEY_HEX,
    NIP26_CONDITIONS,
    WIRE_TAG,
    WIRE_TAG_DELEGATEE_HEX,
    FakeBackend,
)
from nostr_identity.delegation.conditions import DelegationConditions
from nostr_identity.delegation.signature import (
    build_signing_payload,
    generate_signature,
    verify_signature,
)
from nostr_identity.errors import SignatureError, VerificationError
from nostr_identity.keys import PrivateKey, PublicKey, Signature, set_default_backend


@pytest.fixture()
def delegator() -> PrivateKey:
    return PrivateKey.from_hex(DELEGATOR_PRIVKEY_HEX)


@pytest.fixture()
def delegatee() -> PublicKey:
    return PublicKey.from_hex(DELEGATEE_PUBKEY_HEX)


@pytest.fixture()
def conditions() -> DelegationConditions:
    return DelegationConditions.from_string(NIP26_CONDITIONS)


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


class TestSigningPayload:
    def test_payload_is_exact(self, conditions: DelegationConditions) -> None:
        payload = build_signing_payload(DELEGATEE_PUBKEY_HEX, conditions)
        assert payload == (
            b"nostr:delegation:"
            b"477318cfb5427b9cfc66a9fa376150c1ddbc62115ae27cef72417eb959691396"
            b":kind=1&created_at>1674834236&created_at<1677426236"
        )

    def test_payload_accepts_public_key(
        self, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        assert build_signing_payload(delegatee, conditions) == build_signing_payload(
            DELEGATEE_PUBKEY_HEX, conditions
        )

    def test_payload_lowercases_hex(self, conditions: DelegationConditions) -> None:
        assert build_signing_payload(DELEGATEE_PUBKEY_HEX.upper(), conditions) == (
            build_signing_payload(DELEGATEE_PUBKEY_HEX, conditions)
        )

    def test_payload_with_empty_conditions_keeps_trailing_colon(self) -> None:
        payload = build_signing_payload("ab" * 32, DelegationConditions())
        assert payload == b"nostr:delegation:" + b"ab" * 32 + b":"


# ---------------------------------------------------------------------------
# Generate / verify with secp256k1
# ---------------------------------------------------------------------------


class TestGenerateAndVerify:
    def test_delegator_public_key_matches_known_value(self, delegator: PrivateKey) -> None:
        assert delegator.public_key().as_hex_string() == DELEGATOR_PUBKEY_HEX

    def test_generate_then_verify(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        signature = generate_signature(conditions, delegatee, delegator)
        assert len(signature.as_bytes()) == 64
        # Signatures use fresh auxiliary randomness, so verify rather than compare
        verify_signature(conditions, delegator.public_key(), delegatee, signature)

    def test_round_trip_with_random_keys(self) -> None:
        delegator = PrivateKey.generate()
        delegatee = PrivateKey.generate().public_key()
        conditions = DelegationConditions(kind=30023)
        signature = generate_signature(conditions, delegatee, delegator)
        verify_signature(conditions, delegator.public_key(), delegatee, signature)

    def test_swapped_keys_fail(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        signature = generate_signature(conditions, delegatee, delegator)
        with pytest.raises(VerificationError):
            verify_signature(conditions, delegatee, delegator.public_key(), signature)

    def test_different_conditions_fail(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        signature = generate_signature(conditions, delegatee, delegator)
        widened = DelegationConditions(kind=1)
        with pytest.raises(VerificationError) as exc_info:
            verify_signature(widened, delegator.public_key(), delegatee, signature)
        assert "kind=1" in exc_info.value.reason

    def test_different_delegatee_fails(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        signature = generate_signature(conditions, delegatee, delegator)
        other = PrivateKey.generate().public_key()
        with pytest.raises(VerificationError):
            verify_signature(conditions, delegator.public_key(), other, signature)

    def test_tampered_signature_fails(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        raw = generate_signature(conditions, delegatee, delegator).as_bytes()
        tampered = Signature(bytes([raw[0] ^ 0x01]) + raw[1:])
        with pytest.raises(SignatureError):
            verify_signature(conditions, delegator.public_key(), delegatee, tampered)

    def test_verification_error_is_not_value_error(
        self, delegator: PrivateKey, delegatee: PublicKey, conditions: DelegationConditions
    ) -> None:
        signature = generate_signature(conditions, delegatee, delegator)
        with pytest.raises(VerificationError) as exc_info:
            verify_signature(conditions, delegatee, delegatee, signature)
        assert not isinstance(exc_info.value, ValueError)

    def test_known_wire_signature_verifies(self) -> None:
        _, delegator_hex, conditions_text, signature_hex = WIRE_TAG
        verify_signature(
            DelegationConditions.from_string(conditions_text),
            PublicKey.from_hex(delegator_hex),
            PublicKey.from_hex(WIRE_TAG_DELEGATEE_HEX),
            Signature.from_hex(signature_hex),
        )


# ---------------------------------------------------------------------------
# Backend injection
# ---------------------------------------------------------------------------


class TestBackendInjection:
    def test_explicit_backend_receives_payload(self, fake_backend: FakeBackend) -> None:
        delegator = PrivateKey(b"\x07" * 32, fake_backend)
        delegatee = PublicKey(b"\x02" * 32)
        conditions = DelegationConditions(kind=1)

        signature = generate_signature(conditions, delegatee, delegator)
        verify_signature(
            conditions,
            delegator.public_key(),
            delegatee,
            signature,
            backend=fake_backend,
        )

        expected = build_signing_payload(delegatee, conditions)
        assert fake_backend.calls == [("sign", expected), ("verify", expected)]

    def test_default_backend_is_used(self, fake_backend: FakeBackend) -> None:
        set_default_backend(fake_backend)
        delegator = PrivateKey(b"\x07" * 32)
        delegatee = PublicKey(b"\x02" * 32)
        signature = generate_signature(DelegationConditions(), delegatee, delegator)
        verify_signature(DelegationConditions(), delegator.public_key(), delegatee, signature)
        assert [name for name, _ in fake_backend.calls] == ["sign", "verify"]

    def test_fake_backend_swap_detected(self, fake_backend: FakeBackend) -> None:
        delegator = PrivateKey(b"\x07" * 32, fake_backend)
        delegatee = PublicKey(b"\x02" * 32)
        signature = generate_signature(DelegationConditions(), delegatee, delegator)
        with pytest.raises(VerificationError):
            verify_signature(
                DelegationConditions(),
                delegatee,
                delegator.public_key(),
                signature,
                backend=fake_backend,
            )
