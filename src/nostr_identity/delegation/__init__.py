"""NIP-26 delegated event signing.

A delegator signs ``nostr:delegation:<delegatee>:<conditions>`` to let a
delegatee key publish events on its behalf. Anyone holding the delegator's
public key, the conditions string and the signature can verify the grant.

Quick start
-----------
::

    from nostr_identity.delegation import (
        DelegationConditions,
        DelegationTag,
        check_delegation,
    )
    from nostr_identity.keys import PrivateKey

    delegator = PrivateKey.generate()
    delegatee = PrivateKey.generate().public_key()

    conditions = DelegationConditions.from_string(
        "kind=1&created_at>1674834236&created_at<1677426236"
    )
    tag = DelegationTag.create(conditions, delegatee, delegator)

    print(tag.to_list())
    print(check_delegation(tag.to_list(), delegatee))  # DelegatedBy(...)
"""
from __future__ import annotations

from nostr_identity.delegation.conditions import (
    DelegationConditions,
    parse_conditions,
    serialize_conditions,
)
from nostr_identity.delegation.signature import (
    build_signing_payload,
    generate_signature,
    verify_signature,
)
from nostr_identity.delegation.tag import (
    DELEGATION_TAG_NAME,
    DelegatedBy,
    DelegationTag,
    EventDelegation,
    InvalidDelegation,
    NotDelegated,
    check_delegation,
)

__all__ = [
    "DELEGATION_TAG_NAME",
    "DelegatedBy",
    "DelegationConditions",
    "DelegationTag",
    "EventDelegation",
    "InvalidDelegation",
    "NotDelegated",
    "build_signing_payload",
    "check_delegation",
    "generate_signature",
    "parse_conditions",
    "serialize_conditions",
    "verify_signature",
]
