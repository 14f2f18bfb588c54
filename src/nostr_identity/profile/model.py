"""Profile: a public key plus the relays it was last seen publishing to."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from nostr_identity.keys.types import PublicKey


@dataclass(frozen=True)
class Profile:
    """The data needed to follow someone: their key and some relay hints.

    Parameters
    ----------
    pubkey:
        The identity's public key.
    relays:
        Relay URL hints in order. Duplicates and an empty sequence are
        allowed; the strings are not validated as URLs.
    """

    pubkey: PublicKey
    relays: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # A bare str is iterable but would be split into single characters
        if isinstance(self.relays, (str, bytes)):
            raise TypeError("Profile relays must be a sequence of strings, not a single string")
        object.__setattr__(self, "relays", tuple(self.relays))

    @classmethod
    def create(cls, pubkey: PublicKey, relays: Iterable[str] = ()) -> "Profile":
        return cls(pubkey=pubkey, relays=relays)  # type: ignore[arg-type]

    def as_bech32_string(self) -> str:
        """Export as an ``nprofile1…`` string."""
        from nostr_identity.profile.envelope import encode_profile

        return encode_profile(self)

    @classmethod
    def from_bech32_string(cls, value: str) -> "Profile":
        """Import from an ``nprofile1…`` string."""
        from nostr_identity.profile.envelope import decode_profile

        return decode_profile(value)

    def to_dict(self) -> dict[str, object]:
        """Serialize to ``{"pubkey": <hex>, "relays": [...]}``."""
        return {"pubkey": self.pubkey.as_hex_string(), "relays": list(self.relays)}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Profile":
        """Reconstruct a Profile from a dictionary as produced by :meth:`to_dict`."""
        relays = data.get("relays") or []
        if not isinstance(relays, (list, tuple)):
            raise ValueError("Profile 'relays' must be a list of strings")
        return cls(
            pubkey=PublicKey.from_hex(str(data["pubkey"])),
            relays=tuple(str(relay) for relay in relays),
        )


__all__ = ["Profile"]
