"""Pydantic models for JSON representations of profiles and delegation tags.

These validate untrusted JSON (CLI input files, API payloads) before it is
turned into the immutable domain types.
"""
from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from nostr_identity.delegation.conditions import DelegationConditions
from nostr_identity.delegation.tag import DELEGATION_TAG_NAME, DelegationTag
from nostr_identity.keys.types import PublicKey, Signature
from nostr_identity.profile.model import Profile

_PUBKEY_HEX_RE = re.compile(r"[0-9a-f]{64}")
_SIGNATURE_HEX_RE = re.compile(r"[0-9a-f]{128}")


class ProfileModel(BaseModel):
    """JSON body describing a :class:`~nostr_identity.profile.Profile`."""

    pubkey: str
    relays: list[str] = Field(default_factory=list)

    @field_validator("pubkey")
    @classmethod
    def _check_pubkey(cls, value: str) -> str:
        value = value.lower()
        if not _PUBKEY_HEX_RE.fullmatch(value):
            raise ValueError("pubkey must be 64 hex characters")
        return value

    @field_validator("relays")
    @classmethod
    def _check_relays(cls, value: list[str]) -> list[str]:
        for relay in value:
            if len(relay.encode("utf-8")) > 255:
                raise ValueError(f"relay hint {relay[:32]!r}... is longer than 255 bytes")
        return value

    def to_profile(self) -> Profile:
        return Profile(pubkey=PublicKey.from_hex(self.pubkey), relays=tuple(self.relays))

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileModel":
        return cls(pubkey=profile.pubkey.as_hex_string(), relays=list(profile.relays))


class DelegationTagModel(BaseModel):
    """JSON body describing a delegation tag.

    Accepts either an object with ``delegator`` / ``conditions`` /
    ``signature`` keys or the raw four-element tag array.
    """

    delegator: str
    conditions: str = ""
    signature: str

    @model_validator(mode="before")
    @classmethod
    def _accept_tag_array(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 4 or data[0] != DELEGATION_TAG_NAME:
                raise ValueError(
                    f"expected [{DELEGATION_TAG_NAME!r}, delegator, conditions, signature]"
                )
            return {"delegator": data[1], "conditions": data[2], "signature": data[3]}
        return data

    @field_validator("delegator")
    @classmethod
    def _check_delegator(cls, value: str) -> str:
        value = value.lower()
        if not _PUBKEY_HEX_RE.fullmatch(value):
            raise ValueError("delegator must be 64 hex characters")
        return value

    @field_validator("signature")
    @classmethod
    def _check_signature(cls, value: str) -> str:
        value = value.lower()
        if not _SIGNATURE_HEX_RE.fullmatch(value):
            raise ValueError("signature must be 128 hex characters")
        return value

    def to_tag(self) -> DelegationTag:
        return DelegationTag(
            delegator=PublicKey.from_hex(self.delegator),
            conditions=DelegationConditions.from_string(self.conditions),
            signature=Signature.from_hex(self.signature),
        )

    @classmethod
    def from_tag(cls, tag: DelegationTag) -> "DelegationTagModel":
        return cls(
            delegator=tag.delegator.as_hex_string(),
            conditions=tag.conditions.as_string(),
            signature=tag.signature.as_hex_string(),
        )


__all__ = ["DelegationTagModel", "ProfileModel"]
