"""Shared fixtures."""
from __future__ import annotations

from collections.abc import Iterator

import pytest

from nostr_identity.config import CodecConfig, set_config
from nostr_identity.keys.backend import set_default_backend
from vectors import FakeBackend


@pytest.fixture(autouse=True)
def _reset_process_defaults() -> Iterator[None]:
    """Restore the process-wide config and key backend after each test."""
    yield
    set_config(CodecConfig())
    set_default_backend(None)


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()
