"""Exception types raised by nostr-identity.

Every failure surfaces as a subclass of :class:`NostrIdentityError`, so
callers can catch the whole family or a single category. Errors caused by
malformed input also derive from :class:`ValueError`.

Signature errors are deliberately *not* ``ValueError`` subclasses: a
grant that fails verification is well-formed but cryptographically
invalid, and callers need to tell the two situations apart.
"""
from __future__ import annotations


class NostrIdentityError(Exception):
    """Base error for all nostr-identity operations."""


# ------------------------------------------------------------------
# Delegation conditions
# ------------------------------------------------------------------


class MalformedNumberError(NostrIdentityError, ValueError):
    """A numeric field in a conditions string could not be parsed.

    Parameters
    ----------
    value:
        The offending substring (or value) exactly as received.
    """

    def __init__(self, value: str, detail: str = "not a valid integer") -> None:
        self.value = value
        super().__init__(f"Malformed number {value!r}: {detail}")


class UnknownConditionError(NostrIdentityError, ValueError):
    """A conditions string contained a part with no recognised prefix."""

    def __init__(self, part: str) -> None:
        self.part = part
        super().__init__(f"Unknown delegation condition {part!r}")


# ------------------------------------------------------------------
# Keys and signatures
# ------------------------------------------------------------------


class InvalidKeyError(NostrIdentityError, ValueError):
    """Base error for key and signature material that cannot be parsed."""


class InvalidPublicKeyError(InvalidKeyError):
    """Bytes or hex do not form a valid x-only secp256k1 public key."""


class InvalidPrivateKeyError(InvalidKeyError):
    """Bytes or hex do not form a valid secp256k1 secret scalar."""


class InvalidSignatureError(InvalidKeyError):
    """A signature is not 64 bytes of valid hex/binary."""


class SignatureError(NostrIdentityError):
    """Base error for cryptographic signing and verification failures."""


class SigningError(SignatureError):
    """The key backend failed to produce a signature."""


class VerificationError(SignatureError):
    """A signature did not verify.

    Parameters
    ----------
    reason:
        Human-readable explanation, suitable for
        :class:`~nostr_identity.delegation.tag.InvalidDelegation`.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


# ------------------------------------------------------------------
# Profiles (TLV)
# ------------------------------------------------------------------


class InvalidProfileError(NostrIdentityError, ValueError):
    """A TLV buffer violates the nprofile record structure."""

    def __init__(self, reason: str = "Invalid profile") -> None:
        self.reason = reason
        super().__init__(reason)


class RelayHintTooLongError(InvalidProfileError):
    """A relay hint does not fit in a one-byte TLV length field."""

    def __init__(self, relay: str, length: int) -> None:
        self.relay = relay
        self.length = length
        super().__init__(
            f"Relay hint is {length} bytes when UTF-8 encoded; the maximum is 255"
        )


class InvalidUtf8Error(NostrIdentityError, ValueError):
    """A relay hint value is not valid UTF-8."""

    def __init__(self, data: bytes, cause: UnicodeDecodeError) -> None:
        self.data = data
        super().__init__(f"UTF-8 error in relay hint: {cause}")


# ------------------------------------------------------------------
# Bech32 envelope
# ------------------------------------------------------------------


class Bech32Error(NostrIdentityError, ValueError):
    """Base error for bech32 envelope failures."""


class EnvelopeChecksumError(Bech32Error):
    """The bech32 string is malformed or its checksum does not match."""


class EnvelopeMismatchError(Bech32Error):
    """The bech32 human-readable prefix is not the one expected.

    Parameters
    ----------
    expected:
        The prefix the caller asked for (e.g. ``"nprofile"``).
    actual:
        The prefix found in the decoded string.
    """

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Wrong bech32 prefix: expected {expected!r}, found {actual!r}")


# ------------------------------------------------------------------
# Delegation tag
# ------------------------------------------------------------------


class InvalidDelegationTagError(NostrIdentityError, ValueError):
    """A tag array is not a well-formed ``delegation`` tag."""


__all__ = [
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
]
