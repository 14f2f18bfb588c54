"""DelegationConditions: the NIP-26 conditions query string.

A conditions string restricts a delegation grant to one event kind and/or
a creation-time window. Its canonical form is a ``&``-joined list of at
most three parts, always in this order::

    kind=<uint>&created_at><int>&created_at<<int>

Absent fields produce no part, so unconstrained conditions serialize to
the empty string. The canonical form is what gets signed, so
serialization must be byte-exact.

Parsing accepts the parts in any order. Parts with an unrecognised
prefix are skipped by default; see :mod:`nostr_identity.config` to make
them an error.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from nostr_identity.config import get_config
from nostr_identity.errors import MalformedNumberError, UnknownConditionError

logger = logging.getLogger(__name__)

KIND_PREFIX: str = "kind="
CREATED_AFTER_PREFIX: str = "created_at>"
CREATED_BEFORE_PREFIX: str = "created_at<"

_U64_MAX: int = 2**64 - 1
_I64_MIN: int = -(2**63)
_I64_MAX: int = 2**63 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class DelegationConditions:
    """Optional constraints attached to a delegation grant.

    Parameters
    ----------
    kind:
        Event kind the grant is restricted to, or ``None`` for any kind.
    created_after:
        Unix timestamp (seconds); delegated events must be created after it.
    created_before:
        Unix timestamp (seconds); delegated events must be created before it.

    Raises
    ------
    MalformedNumberError
        If *kind* is negative or above 2**64-1, or a timestamp falls outside
        the signed 64-bit range.
    """

    kind: Optional[int] = None
    created_after: Optional[int] = None
    created_before: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is not None:
            _check_range(self.kind, 0, _U64_MAX, "kind")
        if self.created_after is not None:
            _check_range(self.created_after, _I64_MIN, _I64_MAX, "created_after")
        if self.created_before is not None:
            _check_range(self.created_before, _I64_MIN, _I64_MAX, "created_before")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def as_string(self) -> str:
        """Render the canonical conditions string."""
        parts: list[str] = []
        if self.kind is not None:
            parts.append(f"{KIND_PREFIX}{self.kind}")
        if self.created_after is not None:
            parts.append(f"{CREATED_AFTER_PREFIX}{self.created_after}")
        if self.created_before is not None:
            parts.append(f"{CREATED_BEFORE_PREFIX}{self.created_before}")
        return "&".join(parts)

    @classmethod
    def from_string(
        cls, value: str, *, ignore_unknown: Optional[bool] = None
    ) -> "DelegationConditions":
        """Parse a conditions string.

        Parameters
        ----------
        value:
            The ``&``-separated conditions string.
        ignore_unknown:
            Skip parts with an unrecognised prefix (``True``) or raise
            (``False``). Defaults to the process-wide
            :class:`~nostr_identity.config.CodecConfig`.

        Returns
        -------
        DelegationConditions

        Raises
        ------
        MalformedNumberError
            If a numeric field is not a valid integer for its type.
        UnknownConditionError
            If *ignore_unknown* is false and a part is not recognised.
        """
        if ignore_unknown is None:
            ignore_unknown = get_config().ignore_unknown_conditions

        kind: Optional[int] = None
        created_after: Optional[int] = None
        created_before: Optional[int] = None

        for part in value.split("&"):
            if not part:
                continue
            if part.startswith(KIND_PREFIX):
                kind = _parse_unsigned(part[len(KIND_PREFIX):])
            elif part.startswith(CREATED_AFTER_PREFIX):
                created_after = _parse_signed(part[len(CREATED_AFTER_PREFIX):])
            elif part.startswith(CREATED_BEFORE_PREFIX):
                created_before = _parse_signed(part[len(CREATED_BEFORE_PREFIX):])
            elif ignore_unknown:
                logger.debug("Ignoring unknown delegation condition %r", part)
            else:
                raise UnknownConditionError(part)

        return cls(kind=kind, created_after=created_after, created_before=created_before)

    def to_dict(self) -> dict[str, Optional[int]]:
        """Serialize to a plain dictionary."""
        return {
            "kind": self.kind,
            "created_after": self.created_after,
            "created_before": self.created_before,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DelegationConditions":
        """Reconstruct conditions from a dictionary as produced by :meth:`to_dict`."""
        return cls(
            kind=_optional_int(data.get("kind")),
            created_after=_optional_int(data.get("created_after")),
            created_before=_optional_int(data.get("created_before")),
        )

    def __str__(self) -> str:
        return self.as_string()


# ------------------------------------------------------------------
# Module-level API
# ------------------------------------------------------------------


def serialize_conditions(conditions: DelegationConditions) -> str:
    """Return the canonical string for *conditions*."""
    return conditions.as_string()


def parse_conditions(
    value: str, *, ignore_unknown: Optional[bool] = None
) -> DelegationConditions:
    """Parse *value*; see :meth:`DelegationConditions.from_string`."""
    return DelegationConditions.from_string(value, ignore_unknown=ignore_unknown)


# ------------------------------------------------------------------
# Numeric helpers
# ------------------------------------------------------------------


def _parse_unsigned(text: str) -> int:
    if not _UNSIGNED_RE.fullmatch(text):
        raise MalformedNumberError(text)
    number = int(text)
    if number > _U64_MAX:
        raise MalformedNumberError(text, "out of range for an unsigned 64-bit integer")
    return number


def _parse_signed(text: str) -> int:
    if not _SIGNED_RE.fullmatch(text):
        raise MalformedNumberError(text)
    number = int(text)
    if not _I64_MIN <= number <= _I64_MAX:
        raise MalformedNumberError(text, "out of range for a signed 64-bit integer")
    return number


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedNumberError(repr(value), f"{name} must be an integer")
    if not low <= value <= high:
        raise MalformedNumberError(str(value), f"{name} is out of range")


def _optional_int(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_signed(value)
    raise MalformedNumberError(repr(value))


__all__ = [
    "CREATED_AFTER_PREFIX",
    "CREATED_BEFORE_PREFIX",
    "DelegationConditions",
    "KIND_PREFIX",
    "parse_conditions",
    "serialize_conditions",
]
