"""NIP-19 ``nprofile`` identifiers.

Quick start
-----------
::

    from nostr_identity.keys import PublicKey
    from nostr_identity.profile import Profile

    profile = Profile(
        pubkey=PublicKey.from_hex(
            "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"
        ),
        relays=("wss://r.x.com", "wss://djbas.sadkb.com"),
    )
    text = profile.as_bech32_string()  # nprofile1qqsrhuxx8l9ex335q7he...
    assert Profile.from_bech32_string(text) == profile
"""
from __future__ import annotations

from nostr_identity.profile.envelope import NPROFILE_PREFIX, decode_profile, encode_profile
from nostr_identity.profile.model import Profile
from nostr_identity.profile.tlv import decode_tlv, encode_tlv

__all__ = [
    "NPROFILE_PREFIX",
    "Profile",
    "decode_profile",
    "decode_tlv",
    "encode_profile",
    "encode_tlv",
]
