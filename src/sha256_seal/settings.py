"""Environment-backed settings primitives for :mod:`sha256_seal`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["LOG_LEVELS", "SealSettings", "get_settings"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SealSettings(BaseSettings):
    """Expose environment-derived configuration knobs for sealing.

    All environment lookups go through this class. Every attribute maps to a
    documented environment variable and defaults to ``None`` (or an inline
    default) when the variable is absent.

    Attributes:
        max_value_size: Override for the maximum value size in bytes.
        default_scheme: Name of the signature scheme used when a caller does
            not pick one.
        secret: Shared secret consumed by the command line only.
        log_level: Structured logging level for the command line. When unset
            the command line emits no structured logs.
    """

    max_value_size: int | None = Field(
        default=None, alias="SHA256_SEAL_MAX_VALUE_SIZE"
    )
    default_scheme: str | None = Field(default=None, alias="SHA256_SEAL_SCHEME")
    secret: str | None = Field(default=None, alias="SHA256_SEAL_SECRET", repr=False)
    log_level: str | None = Field(default=None, alias="SHA256_SEAL_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("max_value_size", mode="before")
    @classmethod
    def _parse_optional_size(cls, value: object) -> int | None:
        """Parse the size override while tolerating malformed input.

        Args:
            value: Raw environment value.

        Returns:
            Parsed positive integer when conversion succeeds, otherwise
            ``None``.
        """

        parsed: int | None = None
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, int):
            parsed = value
        elif isinstance(value, float) and value.is_integer():
            parsed = int(value)
        elif isinstance(value, str):
            try:
                parsed = int(value.strip())
            except ValueError:
                return None
        if parsed is None or parsed <= 0:
            return None
        return parsed

    @field_validator("default_scheme", "secret", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> str | None:
        """Treat empty strings as unset."""

        if value in (None, ""):
            return None
        return str(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> str | None:
        """Normalise the level name, treating unknown names as unset."""

        if value in (None, ""):
            return None
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            return None
        return level


def get_settings() -> SealSettings:
    """Return a :class:`SealSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return SealSettings()
