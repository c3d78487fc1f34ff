"""SHA-256 Seal - tamper-evident tokens embedded in place of a placeholder."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "InvalidArgumentError",
    "Seal",
    "SealPolicy",
    "SignatureScheme",
    "get_scheme",
    "sign",
    "verify",
]

if TYPE_CHECKING:
    from .builder import Seal, sign, verify
    from .config import SealPolicy
    from .errors import InvalidArgumentError
    from .schemes import SignatureScheme, get_scheme


def __getattr__(name: str) -> Any:
    """Lazily import submodules so importing the package stays cheap."""

    module_map = {
        "InvalidArgumentError": "errors",
        "Seal": "builder",
        "SealPolicy": "config",
        "SignatureScheme": "schemes",
        "get_scheme": "schemes",
        "sign": "builder",
        "verify": "builder",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
