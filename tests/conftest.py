"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from sha256_seal import config  # noqa: E402

_SEAL_ENV_VARS = (
    "SHA256_SEAL_MAX_VALUE_SIZE",
    "SHA256_SEAL_SCHEME",
    "SHA256_SEAL_SECRET",
    "SHA256_SEAL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_policy(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test from a clean environment and an empty policy cache."""

    for name in _SEAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.get_policy.cache_clear()
    yield
    config.get_policy.cache_clear()


@pytest.fixture
def unsigned_path() -> str:
    """Path-like value carrying a single signature placeholder."""

    return "/~bob/.__SIGNATURE_HERE__/documents/"


@pytest.fixture
def placeholder() -> str:
    return "__SIGNATURE_HERE__"
