"""Tests for environment settings and the cached sealing policy."""

from __future__ import annotations

import logging

import pytest

from sha256_seal import Seal
from sha256_seal import config
from sha256_seal.settings import SealSettings, get_settings


def test_settings_defaults() -> None:
    settings = get_settings()

    assert settings.max_value_size is None
    assert settings.default_scheme is None
    assert settings.secret is None
    assert settings.log_level is None


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHA256_SEAL_MAX_VALUE_SIZE", " 2048 ")
    monkeypatch.setenv("SHA256_SEAL_SCHEME", "hmac-sha256-hex")
    monkeypatch.setenv("SHA256_SEAL_SECRET", "from-env")
    monkeypatch.setenv("SHA256_SEAL_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.max_value_size == 2048
    assert settings.default_scheme == "hmac-sha256-hex"
    assert settings.secret == "from-env"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5", ""])
def test_malformed_size_is_ignored(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("SHA256_SEAL_MAX_VALUE_SIZE", raw)

    assert get_settings().max_value_size is None
    assert config.resolve_policy().max_value_size == config.DEFAULT_MAX_VALUE_SIZE


def test_unknown_log_level_is_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHA256_SEAL_LOG_LEVEL", "loud")

    assert get_settings().log_level is None


def test_secret_is_hidden_from_repr() -> None:
    settings = SealSettings(SHA256_SEAL_SECRET="hunter2")

    assert settings.secret == "hunter2"
    assert "hunter2" not in repr(settings)


def test_resolve_policy_defaults() -> None:
    policy = config.resolve_policy()

    assert policy == config.SealPolicy()
    assert policy.max_value_size == 1024 * 1024
    assert policy.default_scheme == "hmac-sha256"


def test_resolve_policy_from_explicit_settings() -> None:
    settings = SealSettings(
        SHA256_SEAL_MAX_VALUE_SIZE="64", SHA256_SEAL_SCHEME="legacy-sha256"
    )

    policy = config.resolve_policy(settings)

    assert policy.max_value_size == 64
    assert policy.default_scheme == "legacy-sha256"


def test_resolve_policy_ignores_unknown_scheme(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("SHA256_SEAL_SCHEME", "md5")

    with caplog.at_level(logging.WARNING, logger="sha256_seal.config"):
        policy = config.resolve_policy()

    assert policy.default_scheme == "hmac-sha256"
    assert "Ignoring unknown signature scheme 'md5'" in caplog.text


def test_policy_is_frozen() -> None:
    with pytest.raises(AttributeError):
        config.SealPolicy().max_value_size = 1  # type: ignore[misc]


def test_get_policy_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = config.get_policy()
    monkeypatch.setenv("SHA256_SEAL_MAX_VALUE_SIZE", "16")

    assert config.get_policy() is first
    assert config.get_policy.cache_info().hits > 0

    config.get_policy.cache_clear()
    assert config.get_policy().max_value_size == 16


def test_seal_uses_environment_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHA256_SEAL_SCHEME", "legacy-sha256")
    monkeypatch.setenv("SHA256_SEAL_MAX_VALUE_SIZE", "40")

    seal = Seal("/~bob/.__SIGNATURE_HERE__/documents/", "secret", "__SIGNATURE_HERE__")

    assert seal.scheme.name == "legacy-sha256"
    assert seal.max_value_size == 40
    assert seal.signature == (
        "8aa1d38b5c16d077d5ac1360c8a6f0248419ff5a3e6dca28a3233894ddcdf3c4"
    )


def test_explicit_scheme_overrides_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SHA256_SEAL_SCHEME", "legacy-sha256")

    seal = Seal("a_X_", "secret", "_X_", scheme="hmac-sha256")

    assert seal.scheme.name == "hmac-sha256"
