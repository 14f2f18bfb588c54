"""CodecConfig: process-wide tolerance settings for the wire codecs.

Two codec behaviours are lenient by default so that existing encoded data
keeps decoding:

- unrecognised ``&``-separated parts of a delegation conditions string are
  skipped instead of rejected;
- a single dangling byte after the last complete TLV record of an
  nprofile is dropped instead of rejected.

Both can be tightened globally with :func:`set_config` (or from the
environment via :meth:`CodecConfig.from_env`), and per call with the
``ignore_unknown`` / ``strict`` keyword arguments of the codecs.

Environment variables
---------------------
``NOSTR_IDENTITY_IGNORE_UNKNOWN_CONDITIONS``
    ``0``/``false`` to reject unknown condition parts.
``NOSTR_IDENTITY_STRICT_TLV``
    ``1``/``true`` to reject trailing TLV bytes.
"""
from __future__ import annotations

import os
import threading
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

ENV_IGNORE_UNKNOWN = "NOSTR_IDENTITY_IGNORE_UNKNOWN_CONDITIONS"
ENV_STRICT_TLV = "NOSTR_IDENTITY_STRICT_TLV"


class CodecConfig(BaseModel):
    """Tolerance settings for the conditions and TLV codecs."""

    model_config = ConfigDict(frozen=True)

    ignore_unknown_conditions: bool = True
    strict_tlv_trailing_bytes: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CodecConfig":
        """Build a config from environment variables.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.

        Raises
        ------
        ValueError
            If a variable is set to something other than a boolean word.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            ignore_unknown_conditions=_env_flag(
                env, ENV_IGNORE_UNKNOWN, defaults.ignore_unknown_conditions
            ),
            strict_tlv_trailing_bytes=_env_flag(
                env, ENV_STRICT_TLV, defaults.strict_tlv_trailing_bytes
            ),
        )


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


_lock = threading.Lock()
_current: CodecConfig = CodecConfig()


def get_config() -> CodecConfig:
    """Return the process-wide codec configuration."""
    return _current


def set_config(config: CodecConfig) -> CodecConfig:
    """Replace the process-wide configuration and return the previous one."""
    global _current
    with _lock:
        previous = _current
        _current = config
    return previous


__all__ = ["CodecConfig", "ENV_IGNORE_UNKNOWN", "ENV_STRICT_TLV", "get_config", "set_config"]
