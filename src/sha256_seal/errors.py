"""Exception types raised by :mod:`sha256_seal`."""

from __future__ import annotations

__all__ = ["InvalidArgumentError"]


class InvalidArgumentError(ValueError):
    """Raised when a seal cannot be built from the supplied inputs.

    This is the only error the library raises. It surfaces at construction
    time; a successfully built :class:`~sha256_seal.builder.Seal` never fails
    afterwards.
    """
