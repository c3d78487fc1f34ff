"""Process-wide sealing policy resolved from the environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from sha256_seal.schemes import DEFAULT_SCHEME_NAME, SCHEMES
from sha256_seal.settings import SealSettings, get_settings

__all__ = ["DEFAULT_MAX_VALUE_SIZE", "SealPolicy", "get_policy", "resolve_policy"]

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_VALUE_SIZE: Final[int] = 1024 * 1024


@dataclass(frozen=True, slots=True)
class SealPolicy:
    """Frozen limits and defaults applied to every seal.

    Attributes:
        max_value_size: Largest accepted value, in UTF-8 bytes.
        default_scheme: Registered scheme name used when none is requested.
    """

    max_value_size: int = DEFAULT_MAX_VALUE_SIZE
    default_scheme: str = DEFAULT_SCHEME_NAME


def resolve_policy(settings: SealSettings | None = None) -> SealPolicy:
    """Build a :class:`SealPolicy` from environment settings.

    Resolution order for each knob: the environment variable parsed by
    :class:`SealSettings`, then the packaged default. An unknown scheme name
    is ignored with a warning.

    Args:
        settings: Optional pre-instantiated settings. When omitted
            :func:`sha256_seal.settings.get_settings` is used.

    Returns:
        The resolved policy.
    """
    env = settings or get_settings()

    max_value_size = env.max_value_size or DEFAULT_MAX_VALUE_SIZE

    default_scheme = DEFAULT_SCHEME_NAME
    if env.default_scheme is not None:
        if env.default_scheme in SCHEMES:
            default_scheme = env.default_scheme
        else:
            LOGGER.warning(
                "Ignoring unknown signature scheme %r; using %s",
                env.default_scheme,
                DEFAULT_SCHEME_NAME,
            )

    return SealPolicy(max_value_size=max_value_size, default_scheme=default_scheme)


@lru_cache(maxsize=1)
def get_policy() -> SealPolicy:
    """Return the cached process-wide policy."""
    return resolve_policy()
