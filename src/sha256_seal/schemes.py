"""
Signature schemes for placeholder sealing.

A scheme fixes the three choices that turn a value into a token:

- salting: whether the placeholder is removed from the value or replaced by
  the secret before digesting
- digest: HMAC-SHA256 keyed by the secret, or a bare SHA-256 (legacy only)
- encoding: URL-safe base64 without padding, or lowercase hex

Signer and verifier must agree on the scheme. Tokens issued under one scheme
never verify under another.

HMAC and constant-time comparison come from the ``cryptography`` package.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType, ModuleType
from typing import Final, Literal, get_args

from .errors import InvalidArgumentError

__all__ = [
    "DEFAULT_SCHEME_NAME",
    "HMAC_SHA256",
    "HMAC_SHA256_HEX",
    "LEGACY_SHA256",
    "SCHEMES",
    "SignatureScheme",
    "get_scheme",
]

Salting = Literal["remove", "secret"]
Digest = Literal["hmac", "plain"]
Encoding = Literal["base64url", "hex"]

_CHOICES: Final[dict[str, tuple[str, ...]]] = {
    "salting": get_args(Salting),
    "digest": get_args(Digest),
    "encoding": get_args(Encoding),
}


@lru_cache(maxsize=1)
def _primitives() -> tuple[ModuleType, ModuleType, ModuleType]:
    """Return the ``cryptography`` modules used for MAC and comparison."""
    try:
        from cryptography.hazmat.primitives import constant_time, hashes, hmac
    except ImportError as exc:
        raise ImportError(
            "Placeholder sealing requires the 'cryptography' package (version 41.0.0 or newer). "
            "Install it with: pip install 'cryptography>=41.0.0'."
        ) from exc
    return hashes, hmac, constant_time


@dataclass(frozen=True, slots=True)
class SignatureScheme:
    """
    Immutable description of how a seal token is derived.

    Attributes:
    ----------
        name: Registry identifier (for example ``"hmac-sha256"``).
        salting: ``"remove"`` drops the placeholder from the value before
            digesting; ``"secret"`` substitutes the secret in its place.
        digest: ``"hmac"`` for HMAC-SHA256 keyed by the secret, ``"plain"``
            for an unkeyed SHA-256 of the salted value.
        encoding: ``"base64url"`` (43 characters, no padding) or ``"hex"``
            (64 lowercase characters).

    """

    name: str
    salting: Salting = "remove"
    digest: Digest = "hmac"
    encoding: Encoding = "base64url"

    def __post_init__(self) -> None:
        for attribute, allowed in _CHOICES.items():
            choice = getattr(self, attribute)
            if choice not in allowed:
                raise InvalidArgumentError(
                    f"unknown {attribute} {choice!r} for scheme {self.name!r}; "
                    f"expected one of {', '.join(allowed)}"
                )

    def salt(self, value: str, secret: str, field: str) -> str:
        """Return the material that gets digested for ``value``."""
        replacement = secret if self.salting == "secret" else ""
        return value.replace(field, replacement, 1)

    def sign(self, value: str, secret: str, field: str) -> str:
        """Compute the encoded token for ``value`` with ``field`` as placeholder."""
        material = self.salt(value, secret, field).encode("utf-8")
        if self.digest == "hmac":
            hashes, hmac, _ = _primitives()
            mac = hmac.HMAC(secret.encode("utf-8"), hashes.SHA256())
            mac.update(material)
            raw = mac.finalize()
        elif self.digest == "plain":
            raw = hashlib.sha256(material).digest()
        else:  # pragma: no cover - rejected in __post_init__
            raise InvalidArgumentError(f"unknown digest {self.digest!r}")
        return self.encode(raw)

    def encode(self, raw: bytes) -> str:
        """Render a raw digest in this scheme's token alphabet."""
        if self.encoding == "hex":
            return raw.hex()
        if self.encoding != "base64url":  # pragma: no cover - rejected in __post_init__
            raise InvalidArgumentError(f"unknown encoding {self.encoding!r}")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    @staticmethod
    def tokens_match(expected: str, candidate: str) -> bool:
        """Compare two tokens in constant time."""
        _, _, constant_time = _primitives()
        return bool(
            constant_time.bytes_eq(expected.encode("utf-8"), candidate.encode("utf-8"))
        )


HMAC_SHA256: Final[SignatureScheme] = SignatureScheme("hmac-sha256")
HMAC_SHA256_HEX: Final[SignatureScheme] = SignatureScheme(
    "hmac-sha256-hex", encoding="hex"
)
# Tokens issued by the first release: SHA-256 over the value with the secret
# spliced into the placeholder position.
LEGACY_SHA256: Final[SignatureScheme] = SignatureScheme(
    "legacy-sha256", salting="secret", digest="plain", encoding="hex"
)

SCHEMES: Final[Mapping[str, SignatureScheme]] = MappingProxyType(
    {
        scheme.name: scheme
        for scheme in (HMAC_SHA256, HMAC_SHA256_HEX, LEGACY_SHA256)
    }
)
DEFAULT_SCHEME_NAME: Final[str] = HMAC_SHA256.name


def get_scheme(scheme: SignatureScheme | str) -> SignatureScheme:
    """Resolve ``scheme`` to a registered :class:`SignatureScheme`.

    Args:
        scheme: A scheme instance (returned unchanged) or a registry name.

    Returns:
        The matching scheme.

    Raises:
        InvalidArgumentError: If ``scheme`` names no registered scheme or is
            not a name at all.
    """
    if isinstance(scheme, SignatureScheme):
        return scheme
    try:
        return SCHEMES[scheme]
    except (KeyError, TypeError):
        raise InvalidArgumentError(f"unknown signature scheme: {scheme}") from None
