"""Key backends: the signing capability the delegation protocol calls into.

:class:`KeyBackend` defines the capability set (generate, derive, validate,
sign, verify) over raw bytes. :class:`SchnorrKeyBackend` implements it with
BIP-340 Schnorr signatures over secp256k1 via the ``coincurve`` package.

Messages are hashed with SHA-256 before signing and verifying, which is the
convention nostr uses for delegation tokens and event ids. Callers pass the
full message; backends never receive a digest.

Swapping the backend (for a hardware signer, or a stub in tests) does not
require changes to the codecs: pass ``backend=`` explicitly or install a new
default with :func:`set_default_backend`.
"""
from __future__ import annotations

import hashlib
import os
import threading
from abc import ABC, abstractmethod

from coincurve.keys import PrivateKey as _Secp256k1PrivateKey
from coincurve.keys import PublicKeyXOnly

from nostr_identity.errors import (
    InvalidPrivateKeyError,
    InvalidPublicKeyError,
    SigningError,
)

PUBLIC_KEY_LENGTH: int = 32
PRIVATE_KEY_LENGTH: int = 32
SIGNATURE_LENGTH: int = 64


class KeyBackend(ABC):
    """Abstract signing capability operating on raw key bytes."""

    @abstractmethod
    def generate_private_key(self) -> bytes:
        """Return a fresh 32-byte secret key."""

    @abstractmethod
    def derive_public_key(self, private_key: bytes) -> bytes:
        """Return the 32-byte x-only public key for *private_key*.

        Raises
        ------
        InvalidPrivateKeyError
            If *private_key* is not a valid secret scalar.
        """

    @abstractmethod
    def validate_public_key(self, public_key: bytes) -> None:
        """Check that *public_key* is a valid 32-byte x-only key.

        Raises
        ------
        InvalidPublicKeyError
            If the bytes are not a point on the curve.
        """

    @abstractmethod
    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """Sign *message* and return a 64-byte signature.

        Raises
        ------
        SigningError
            If the backend cannot produce a signature.
        """

    @abstractmethod
    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Return ``True`` if *signature* over *message* is valid for *public_key*."""


class SchnorrKeyBackend(KeyBackend):
    """BIP-340 Schnorr over secp256k1, backed by ``coincurve``.

    Example
    -------
    ::

        backend = SchnorrKeyBackend()
        secret = backend.generate_private_key()
        public = backend.derive_public_key(secret)
        signature = backend.sign(secret, b"hello")
        assert backend.verify(public, b"hello", signature)
    """

    def generate_private_key(self) -> bytes:
        return _Secp256k1PrivateKey().secret

    def derive_public_key(self, private_key: bytes) -> bytes:
        # Compressed SEC1 encoding minus the parity byte is the x-only key
        return self._load_private_key(private_key).public_key.format(compressed=True)[1:]

    def validate_public_key(self, public_key: bytes) -> None:
        if len(public_key) != PUBLIC_KEY_LENGTH:
            raise InvalidPublicKeyError(
                f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}"
            )
        try:
            PublicKeyXOnly(public_key)
        except ValueError as exc:
            raise InvalidPublicKeyError(f"Invalid public key: {exc}") from exc

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        key = self._load_private_key(private_key)
        digest = hashlib.sha256(message).digest()
        try:
            return key.sign_schnorr(digest, os.urandom(32))
        except ValueError as exc:
            raise SigningError(f"Schnorr signing failed: {exc}") from exc

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        if len(signature) != SIGNATURE_LENGTH:
            return False
        self.validate_public_key(public_key)
        digest = hashlib.sha256(message).digest()
        return bool(PublicKeyXOnly(public_key).verify(signature, digest))

    @staticmethod
    def _load_private_key(private_key: bytes) -> _Secp256k1PrivateKey:
        if len(private_key) != PRIVATE_KEY_LENGTH:
            raise InvalidPrivateKeyError(
                f"Private key must be {PRIVATE_KEY_LENGTH} bytes, got {len(private_key)}"
            )
        try:
            return _Secp256k1PrivateKey(private_key)
        except ValueError as exc:
            raise InvalidPrivateKeyError(f"Invalid private key: {exc}") from exc


_backend_lock = threading.Lock()
_default_backend: KeyBackend | None = None


def get_default_backend() -> KeyBackend:
    """Return the process-wide backend, creating a :class:`SchnorrKeyBackend` on first use."""
    global _default_backend
    with _backend_lock:
        if _default_backend is None:
            _default_backend = SchnorrKeyBackend()
        return _default_backend


def set_default_backend(backend: KeyBackend | None) -> None:
    """Install *backend* as the process-wide default (``None`` resets it)."""
    global _default_backend
    with _backend_lock:
        _default_backend = backend


__all__ = [
    "KeyBackend",
    "PRIVATE_KEY_LENGTH",
    "PUBLIC_KEY_LENGTH",
    "SIGNATURE_LENGTH",
    "SchnorrKeyBackend",
    "get_default_backend",
    "set_default_backend",
]
