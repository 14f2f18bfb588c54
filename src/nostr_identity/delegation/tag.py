"""Delegation tag wire form and the event-delegation outcome type.

A delegated event carries one tag of the form::

    ["delegation", <delegator-pubkey-hex>, <conditions>, <signature-hex>]

:class:`DelegationTag` parses and renders that array. :func:`check_delegation`
verifies a tag against the event's signer and returns an
:data:`EventDelegation` outcome:

- :class:`NotDelegated` when there is no tag;
- :class:`InvalidDelegation` with a reason when the tag fails;
- :class:`DelegatedBy` with the delegator key when it verifies.

Whether an event's kind and timestamp actually satisfy the conditions is
the caller's policy and is not checked here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from nostr_identity.delegation.conditions import DelegationConditions
from nostr_identity.delegation.signature import generate_signature, verify_signature
from nostr_identity.errors import InvalidDelegationTagError, NostrIdentityError
from nostr_identity.keys.backend import KeyBackend
from nostr_identity.keys.types import PrivateKey, PublicKey, Signature

DELEGATION_TAG_NAME: str = "delegation"


@dataclass(frozen=True)
class DelegationTag:
    """A parsed ``delegation`` tag.

    Parameters
    ----------
    delegator:
        Public key of the identity granting the delegation.
    conditions:
        Conditions the grant is restricted to.
    signature:
        The delegator's signature over the grant payload.
    """

    delegator: PublicKey
    conditions: DelegationConditions
    signature: Signature

    @classmethod
    def create(
        cls,
        conditions: DelegationConditions,
        delegatee_pubkey: PublicKey,
        delegator_private_key: PrivateKey,
        *,
        backend: KeyBackend | None = None,
    ) -> "DelegationTag":
        """Sign a new grant and wrap it as a tag."""
        signature = generate_signature(
            conditions, delegatee_pubkey, delegator_private_key, backend=backend
        )
        delegator = (
            PublicKey(backend.derive_public_key(delegator_private_key.raw))
            if backend is not None
            else delegator_private_key.public_key()
        )
        return cls(delegator=delegator, conditions=conditions, signature=signature)

    def verify(self, delegatee_pubkey: PublicKey, *, backend: KeyBackend | None = None) -> None:
        """Verify this grant for *delegatee_pubkey*.

        Raises
        ------
        VerificationError
            If the signature does not verify.
        """
        verify_signature(
            self.conditions, self.delegator, delegatee_pubkey, self.signature, backend=backend
        )

    # ------------------------------------------------------------------
    # Wire form
    # ------------------------------------------------------------------

    def to_list(self) -> list[str]:
        """Render the tag as its four-element string array."""
        return [
            DELEGATION_TAG_NAME,
            self.delegator.as_hex_string(),
            self.conditions.as_string(),
            self.signature.as_hex_string(),
        ]

    @classmethod
    def from_list(
        cls,
        tag: Sequence[str],
        *,
        ignore_unknown: Optional[bool] = None,
        backend: KeyBackend | None = None,
    ) -> "DelegationTag":
        """Parse a four-element ``delegation`` tag array.

        Raises
        ------
        InvalidDelegationTagError
            If the array has the wrong length, name, or element types.
        InvalidPublicKeyError, InvalidSignatureError, MalformedNumberError
            If an element does not parse.
        """
        if len(tag) != 4:
            raise InvalidDelegationTagError(
                f"Delegation tag must have 4 elements, got {len(tag)}"
            )
        if not all(isinstance(item, str) for item in tag):
            raise InvalidDelegationTagError("Delegation tag elements must be strings")
        name, pubkey_hex, conditions, signature_hex = tag
        if name != DELEGATION_TAG_NAME:
            raise InvalidDelegationTagError(
                f"Expected a {DELEGATION_TAG_NAME!r} tag, got {name!r}"
            )
        return cls(
            delegator=PublicKey.from_hex(pubkey_hex, backend),
            conditions=DelegationConditions.from_string(
                conditions, ignore_unknown=ignore_unknown
            ),
            signature=Signature.from_hex(signature_hex),
        )


# ------------------------------------------------------------------
# EventDelegation outcome
# ------------------------------------------------------------------


@dataclass(frozen=True)
class NotDelegated:
    """The event carries no delegation tag."""


@dataclass(frozen=True)
class InvalidDelegation:
    """A delegation tag is present but failed; *reason* says why."""

    reason: str


@dataclass(frozen=True)
class DelegatedBy:
    """The delegation verified; treat *pubkey* as the event's author."""

    pubkey: PublicKey


EventDelegation = Union[NotDelegated, InvalidDelegation, DelegatedBy]


def check_delegation(
    tag: Union[DelegationTag, Sequence[str], None],
    delegatee_pubkey: PublicKey,
    *,
    backend: KeyBackend | None = None,
) -> EventDelegation:
    """Verify an event's delegation tag against the event's signer.

    Parameters
    ----------
    tag:
        A parsed :class:`DelegationTag`, a raw tag array, or ``None`` when
        the event has no delegation tag.
    delegatee_pubkey:
        The key that actually signed the event.
    backend:
        Key backend used for parsing and verification.

    Returns
    -------
    EventDelegation
        Never raises for a bad tag; the failure is reported as
        :class:`InvalidDelegation`.
    """
    if tag is None:
        return NotDelegated()
    try:
        parsed = (
            tag if isinstance(tag, DelegationTag) else DelegationTag.from_list(tag, backend=backend)
        )
        parsed.verify(delegatee_pubkey, backend=backend)
    except NostrIdentityError as exc:
        return InvalidDelegation(reason=str(exc))
    return DelegatedBy(pubkey=parsed.delegator)


__all__ = [
    "DELEGATION_TAG_NAME",
    "DelegatedBy",
    "DelegationTag",
    "EventDelegation",
    "InvalidDelegation",
    "NotDelegated",
    "check_delegation",
]
