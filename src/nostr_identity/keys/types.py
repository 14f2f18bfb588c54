"""Key and signature value types.

:class:`PublicKey`, :class:`PrivateKey` and :class:`Signature` are immutable
wrappers around raw bytes. They validate length and encoding on
construction and render to lowercase hex (and, for keys, NIP-19 bech32).
Curve validity is checked through the configured
:class:`~nostr_identity.keys.backend.KeyBackend`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from nostr_identity.encoding import decode_bech32_expecting, encode_bech32
from nostr_identity.errors import (
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    InvalidSignatureError,
)
from nostr_identity.keys.backend import (
    PRIVATE_KEY_LENGTH,
    PUBLIC_KEY_LENGTH,
    SIGNATURE_LENGTH,
    KeyBackend,
    get_default_backend,
)

NPUB_PREFIX: str = "npub"
NSEC_PREFIX: str = "nsec"

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def _decode_fixed_hex(value: str, length: int) -> Optional[bytes]:
    """Return the decoded bytes, or ``None`` if *value* is not *length* bytes of hex."""
    if len(value) != length * 2 or not _HEX_RE.fullmatch(value):
        return None
    return bytes.fromhex(value)


@dataclass(frozen=True)
class PublicKey:
    """A 32-byte x-only secp256k1 public key.

    Use the ``from_*`` constructors; they validate the key against the
    curve. Direct construction only checks the length.
    """

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != PUBLIC_KEY_LENGTH:
            raise InvalidPublicKeyError(
                f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_bytes(cls, data: bytes, backend: KeyBackend | None = None) -> "PublicKey":
        """Parse a raw 32-byte key, checking it lies on the curve."""
        data = bytes(data)
        (backend or get_default_backend()).validate_public_key(data)
        return cls(data)

    @classmethod
    def from_hex(cls, value: str, backend: KeyBackend | None = None) -> "PublicKey":
        """Parse a 64-character hex string (either case)."""
        data = _decode_fixed_hex(value, PUBLIC_KEY_LENGTH)
        if data is None:
            raise InvalidPublicKeyError(f"Public key hex must be 64 hex characters: {value!r}")
        return cls.from_bytes(data, backend)

    @classmethod
    def from_bech32(cls, value: str, backend: KeyBackend | None = None) -> "PublicKey":
        """Parse an ``npub1…`` string."""
        return cls.from_bytes(decode_bech32_expecting(NPUB_PREFIX, value), backend)

    def as_bytes(self) -> bytes:
        return self.raw

    def as_hex_string(self) -> str:
        return self.raw.hex()

    def as_bech32_string(self) -> str:
        return encode_bech32(NPUB_PREFIX, self.raw)

    def verify(
        self, message: bytes, signature: "Signature", backend: KeyBackend | None = None
    ) -> bool:
        """Return ``True`` if *signature* over *message* was made by this key."""
        return (backend or get_default_backend()).verify(self.raw, message, signature.raw)

    def __str__(self) -> str:
        return self.as_hex_string()


@dataclass(frozen=True)
class Signature:
    """A 64-byte BIP-340 Schnorr signature."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != SIGNATURE_LENGTH:
            raise InvalidSignatureError(
                f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_hex(cls, value: str) -> "Signature":
        data = _decode_fixed_hex(value, SIGNATURE_LENGTH)
        if data is None:
            raise InvalidSignatureError(f"Signature hex must be 128 hex characters: {value!r}")
        return cls(data)

    def as_bytes(self) -> bytes:
        return self.raw

    def as_hex_string(self) -> str:
        return self.raw.hex()

    def __str__(self) -> str:
        return self.as_hex_string()


@dataclass(frozen=True)
class PrivateKey:
    """A 32-byte secp256k1 secret key.

    The secret never appears in ``repr()``. Signing goes through the
    backend the key was created with (the process default if none).
    """

    raw: bytes = field(repr=False)
    backend: Optional[KeyBackend] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.raw) != PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(self.raw)}"
            )

    @property
    def _backend(self) -> KeyBackend:
        return self.backend or get_default_backend()

    @classmethod
    def generate(cls, backend: KeyBackend | None = None) -> "PrivateKey":
        """Create a new random private key."""
        return cls((backend or get_default_backend()).generate_private_key(), backend)

    @classmethod
    def from_bytes(cls, data: bytes, backend: KeyBackend | None = None) -> "PrivateKey":
        """Parse a raw 32-byte secret, checking it is a valid scalar."""
        key = cls(bytes(data), backend)
        key.public_key()
        return key

    @classmethod
    def from_hex(cls, value: str, backend: KeyBackend | None = None) -> "PrivateKey":
        data = _decode_fixed_hex(value, PRIVATE_KEY_LENGTH)
        if data is None:
            raise InvalidPrivateKeyError("Private key hex must be 64 hex characters")
        return cls.from_bytes(data, backend)

    @classmethod
    def from_bech32(cls, value: str, backend: KeyBackend | None = None) -> "PrivateKey":
        """Parse an ``nsec1…`` string."""
        return cls.from_bytes(decode_bech32_expecting(NSEC_PREFIX, value), backend)

    def public_key(self) -> PublicKey:
        return PublicKey(self._backend.derive_public_key(self.raw))

    def sign(self, message: bytes) -> Signature:
        """Sign *message* (hashed with SHA-256 by the backend)."""
        return Signature(self._backend.sign(self.raw, message))

    def as_hex_string(self) -> str:
        return self.raw.hex()

    def as_bech32_string(self) -> str:
        return encode_bech32(NSEC_PREFIX, self.raw)


__all__ = ["NPUB_PREFIX", "NSEC_PREFIX", "PrivateKey", "PublicKey", "Signature"]
