"""
Placeholder sealing: sign a value in place, or check that it is signed.

A :class:`Seal` pairs a value with a secret and a field. When signing, the
field is a placeholder that occurs exactly once in the value and
:meth:`Seal.signed_value` swaps it for a keyed digest of the rest of the
value. When verifying, the field is the token found in a signed value and
:meth:`Seal.is_signed` tells whether it matches the digest recomputed from
the rest of the value.

Example::

    url = Seal("/files/42?sig=__SIG__", secret, "__SIG__").signed_value()
    token = url.rsplit("=", 1)[1]
    Seal(url, secret, token).is_signed()  # True
"""

from __future__ import annotations

import logging
from typing import NoReturn

from .config import SealPolicy, get_policy
from .errors import InvalidArgumentError
from .schemes import SignatureScheme, get_scheme

__all__ = ["Seal", "sign", "verify"]

logger = logging.getLogger(__name__)

_INPUT_NAMES = ("value", "secret", "field")


def _reject(message: str) -> NoReturn:
    logger.debug("Rejected seal inputs: %s", message)
    raise InvalidArgumentError(message)


def _raw(obj: object) -> str | bytes:
    """Return ``obj`` as text, keeping bytes for strict decoding later."""
    if obj is None:
        return ""
    if isinstance(obj, (str, bytes)):
        return obj
    if isinstance(obj, (bytearray, memoryview)):
        return bytes(obj)
    return str(obj)


def _as_text(name: str, raw: str | bytes) -> str:
    """Return ``raw`` as well-formed UTF-8 text or reject it."""
    try:
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        # Lone surrogates survive in ``str`` but cannot be encoded.
        raw.encode("utf-8")
    except UnicodeError:
        _reject(f"{name} contains invalid characters")
    return raw


class Seal:
    """
    Immutable builder/verifier for a single placeholder.

    Args:
    ----
        value: Text holding the placeholder (when signing) or the token (when
            verifying). Non-text values are converted with ``str()``; bytes
            are decoded as UTF-8 and ``None`` counts as empty.
        secret: Shared key. It never appears in any output.
        field: The placeholder, or the candidate token to check.
        scheme: Signature scheme or its registered name. Defaults to the
            policy's default scheme.
        policy: Size limit and defaults. Defaults to the process-wide policy
            from :func:`sha256_seal.config.get_policy`.

    Raises:
    ------
        InvalidArgumentError: If an input is empty, is not valid UTF-8, the
            value exceeds the size limit, or ``field`` does not occur exactly
            once in ``value``.

    """

    __slots__ = ("_value", "_secret", "_field", "_scheme", "_max_value_size")

    _value: str
    _secret: str
    _field: str
    _scheme: SignatureScheme
    _max_value_size: int

    def __init__(
        self,
        value: object,
        secret: object,
        field: object,
        *,
        scheme: SignatureScheme | str | None = None,
        policy: SealPolicy | None = None,
    ) -> None:
        """Validate the inputs once and freeze them."""
        active = policy or get_policy()
        resolved_scheme = get_scheme(
            scheme if scheme is not None else active.default_scheme
        )

        raws = [_raw(obj) for obj in (value, secret, field)]
        for name, raw in zip(_INPUT_NAMES, raws):
            if not raw:
                _reject(f"{name} cannot be empty")
        text_value, text_secret, text_field = (
            _as_text(name, raw) for name, raw in zip(_INPUT_NAMES, raws)
        )

        if len(text_value.encode("utf-8")) > active.max_value_size:
            _reject("value too large")

        # str.count matches the field literally and without overlaps.
        occurrences = text_value.count(text_field)
        if occurrences != 1:
            _reject(f"{occurrences} occurrences instead of 1")

        object.__setattr__(self, "_value", text_value)
        object.__setattr__(self, "_secret", text_secret)
        object.__setattr__(self, "_field", text_field)
        object.__setattr__(self, "_scheme", resolved_scheme)
        object.__setattr__(self, "_max_value_size", active.max_value_size)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(value={self._value!r}, field={self._field!r}, "
            f"scheme={self._scheme.name!r})"
        )

    @property
    def value(self) -> str:
        """The validated value text."""
        return self._value

    @property
    def secret(self) -> str:
        """The shared secret."""
        return self._secret

    @property
    def field(self) -> str:
        """The placeholder or candidate token."""
        return self._field

    @property
    def scheme(self) -> SignatureScheme:
        """The scheme used to derive the signature."""
        return self._scheme

    @property
    def max_value_size(self) -> int:
        """The size limit this seal was validated against."""
        return self._max_value_size

    @property
    def signature(self) -> str:
        """The token computed over the value with the field salted out."""
        return self._scheme.sign(self._value, self._secret, self._field)

    def signed_value(self) -> str:
        """Return the value with the field replaced by the signature."""
        return self._value.replace(self._field, self.signature, 1)

    def is_signed(self) -> bool:
        """Return ``True`` when the field already equals the signature."""
        return self._scheme.tokens_match(self.signature, self._field)


def sign(
    value: object,
    secret: object,
    field: object,
    *,
    scheme: SignatureScheme | str | None = None,
) -> str:
    """Return ``value`` with the placeholder ``field`` replaced by its signature."""
    return Seal(value, secret, field, scheme=scheme).signed_value()


def verify(
    value: object,
    secret: object,
    token: object,
    *,
    scheme: SignatureScheme | str | None = None,
) -> bool:
    """Return whether ``token`` is the valid signature embedded in ``value``.

    Raises:
        InvalidArgumentError: If the inputs fail validation, including when
            ``token`` does not occur exactly once in ``value``.
    """
    return Seal(value, secret, token, scheme=scheme).is_signed()
