"""Process-local ledger with commit/reveal semantics."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from threading import Lock

from blackbox.errors import EntryNotFoundError, LedgerError
from blackbox.ledger.base import LedgerClient
from blackbox.ledger.commit import (
    CHAIN_CREATION_COST,
    build_chain_commit,
    build_entry_commit,
    entry_cost,
)
from blackbox.models import Chain, Entry
from blackbox.signing import KeyPair

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Commit:
    tx_id: str
    payer: bytes
    credits: int
    creates_chain: bool


class InMemoryLedger(LedgerClient):
    """Ledger kept in memory, for tests and offline runs.

    Reveals must follow a commit for the same entry hash, entries may only be
    revealed on existing chains and a chain can be created once. Revealed
    entries are immutable and returned in reveal order.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._commits: dict[str, _Commit] = {}
        self._chains: dict[str, list[str]] = {}
        self._entries: dict[str, Entry] = {}
        self._credits_spent: dict[bytes, int] = {}

    def chain_exists(self, chain_id: str) -> bool:
        with self._lock:
            return chain_id in self._chains

    def commit_chain(self, chain: Chain, payer: KeyPair) -> str:
        message = build_chain_commit(chain, payer)
        credits = entry_cost(chain.first_entry) + CHAIN_CREATION_COST
        return self._commit(chain.first_entry, payer, message, credits, creates_chain=True)

    def reveal_chain(self, chain: Chain) -> str:
        entry = chain.first_entry
        entry_hash = entry.entry_hash
        with self._lock:
            self._take_commit(entry_hash, creates_chain=True)
            if chain.chain_id in self._chains:
                raise LedgerError(f"Chain {chain.chain_id} already exists")
            self._chains[chain.chain_id] = [entry_hash]
            self._entries[entry_hash] = entry
        LOGGER.debug("Chain revealed", extra={"chain_id": chain.chain_id})
        return entry_hash

    def commit_entry(self, entry: Entry, payer: KeyPair) -> str:
        message = build_entry_commit(entry, payer)
        return self._commit(entry, payer, message, entry_cost(entry), creates_chain=False)

    def reveal_entry(self, entry: Entry) -> str:
        entry_hash = entry.entry_hash
        with self._lock:
            self._take_commit(entry_hash, creates_chain=False)
            history = self._chains.get(entry.chain_id)
            if history is None:
                raise LedgerError(f"Chain {entry.chain_id} does not exist")
            history.append(entry_hash)
            self._entries[entry_hash] = entry
        LOGGER.debug(
            "Entry revealed",
            extra={"chain_id": entry.chain_id, "entry_hash": entry_hash},
        )
        return entry_hash

    def get_all_chain_entries(self, chain_id: str) -> list[Entry]:
        with self._lock:
            history = self._chains.get(chain_id)
            if history is None:
                raise LedgerError(f"Chain {chain_id} does not exist")
            return [self._entries[entry_hash] for entry_hash in history]

    def get_entry(self, entry_hash: str) -> Entry:
        with self._lock:
            entry = self._entries.get(entry_hash)
        if entry is None:
            raise EntryNotFoundError(f"Entry {entry_hash} not found")
        return entry

    def credits_spent(self, payer: KeyPair) -> int:
        """Return the entry credits charged to ``payer`` so far."""

        with self._lock:
            return self._credits_spent.get(payer.public_key, 0)

    def _commit(
        self,
        entry: Entry,
        payer: KeyPair,
        message: bytes,
        credits: int,
        *,
        creates_chain: bool,
    ) -> str:
        tx_id = hashlib.sha256(message).hexdigest()
        with self._lock:
            self._commits[entry.entry_hash] = _Commit(
                tx_id=tx_id,
                payer=payer.public_key,
                credits=credits,
                creates_chain=creates_chain,
            )
            self._credits_spent[payer.public_key] = (
                self._credits_spent.get(payer.public_key, 0) + credits
            )
        return tx_id

    def _take_commit(self, entry_hash: str, *, creates_chain: bool) -> _Commit:
        commit = self._commits.pop(entry_hash, None)
        if commit is None or commit.creates_chain != creates_chain:
            raise LedgerError(f"No matching commit for entry {entry_hash}")
        return commit
