"""Abstract interface to the append-only ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from blackbox.models import Chain, Entry
from blackbox.signing import KeyPair


class LedgerClient(ABC):
    """Remote ledger with commit/reveal submission and eventual visibility.

    Implementations raise :class:`blackbox.errors.LedgerError` (or a subclass)
    for every failure. Nothing is retried inside a client.
    """

    @abstractmethod
    def chain_exists(self, chain_id: str) -> bool:
        """Return ``True`` if a chain with ``chain_id`` has been created."""

    @abstractmethod
    def commit_chain(self, chain: Chain, payer: KeyPair) -> str:
        """Pay for a chain creation and return the commit transaction ID."""

    @abstractmethod
    def reveal_chain(self, chain: Chain) -> str:
        """Publish a committed chain and return its first entry hash."""

    @abstractmethod
    def commit_entry(self, entry: Entry, payer: KeyPair) -> str:
        """Pay for an entry and return the commit transaction ID."""

    @abstractmethod
    def reveal_entry(self, entry: Entry) -> str:
        """Publish a committed entry and return its entry hash."""

    @abstractmethod
    def get_all_chain_entries(self, chain_id: str) -> list[Entry]:
        """Return every visible entry on ``chain_id``, oldest first."""

    @abstractmethod
    def get_entry(self, entry_hash: str) -> Entry:
        """Return the entry addressed by ``entry_hash``."""
