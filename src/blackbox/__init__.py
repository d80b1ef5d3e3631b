"""Blackbox - tamper-evident anchoring of vehicle data on a ledger."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "AnchorWriter",
    "IntegrityVerifier",
    "KeyPair",
    "Person",
    "Registrar",
    "Vehicle",
    "derive_chain_id",
    "fingerprint_file",
]

if TYPE_CHECKING:
    from .anchor import AnchorWriter
    from .entities import Person, Vehicle
    from .fingerprint import fingerprint_file
    from .identity import derive_chain_id
    from .integrity import IntegrityVerifier
    from .registrar import Registrar
    from .signing import KeyPair


def __getattr__(name: str) -> Any:
    """Lazily import submodules so ``import blackbox`` stays cheap."""

    module_map = {
        "AnchorWriter": "anchor",
        "IntegrityVerifier": "integrity",
        "KeyPair": "signing",
        "Person": "entities",
        "Registrar": "registrar",
        "Vehicle": "entities",
        "derive_chain_id": "identity",
        "fingerprint_file": "fingerprint",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
