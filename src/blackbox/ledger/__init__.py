"""Ledger client implementations and abstractions."""

from __future__ import annotations

from blackbox.ledger.base import LedgerClient
from blackbox.ledger.factomd import FactomdClient
from blackbox.ledger.memory import InMemoryLedger

__all__ = [
    "FactomdClient",
    "InMemoryLedger",
    "LedgerClient",
]
