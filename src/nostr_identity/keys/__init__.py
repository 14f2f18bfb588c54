"""secp256k1 keys, Schnorr signatures and the pluggable key backend.

Quick start
-----------
::

    from nostr_identity.keys import PrivateKey, PublicKey

    secret = PrivateKey.generate()
    public = secret.public_key()
    signature = secret.sign(b"hello")
    assert public.verify(b"hello", signature)

    print(public.as_bech32_string())  # npub1...
"""
from __future__ import annotations

from nostr_identity.keys.backend import (
    KeyBackend,
    SchnorrKeyBackend,
    get_default_backend,
    set_default_backend,
)
from nostr_identity.keys.types import PrivateKey, PublicKey, Signature

__all__ = [
    "KeyBackend",
    "PrivateKey",
    "PublicKey",
    "SchnorrKeyBackend",
    "Signature",
    "get_default_backend",
    "set_default_backend",
]
