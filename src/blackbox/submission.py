"""Commit-then-reveal submission treated as a single operation."""

from __future__ import annotations

import logging

from .errors import LedgerError, RevealError
from .ledger.base import LedgerClient
from .models import Chain, Entry
from .signing import KeyPair

__all__ = ["submit_chain", "submit_entry"]

LOGGER = logging.getLogger(__name__)


def submit_chain(client: LedgerClient, chain: Chain, payer: KeyPair) -> str:
    """Create ``chain`` on the ledger and return the commit transaction ID.

    Raises:
        LedgerError: Propagated unchanged when the commit fails; nothing was
            submitted.
        RevealError: When the commit succeeded but the reveal failed.
    """

    tx_id = client.commit_chain(chain, payer)
    try:
        client.reveal_chain(chain)
    except LedgerError as exc:
        LOGGER.error(
            "Chain committed but not revealed",
            extra={"chain_id": chain.chain_id, "tx_id": tx_id},
            exc_info=exc,
        )
        raise RevealError(
            f"Chain {chain.chain_id} committed in {tx_id} but reveal failed: {exc}",
            tx_id=tx_id,
            entry_hash=chain.first_entry.entry_hash,
        ) from exc
    return tx_id


def submit_entry(client: LedgerClient, entry: Entry, payer: KeyPair) -> str:
    """Append ``entry`` to its chain and return the commit transaction ID.

    Raises:
        LedgerError: Propagated unchanged when the commit fails.
        RevealError: When the commit succeeded but the reveal failed.
    """

    tx_id = client.commit_entry(entry, payer)
    try:
        client.reveal_entry(entry)
    except LedgerError as exc:
        LOGGER.error(
            "Entry committed but not revealed",
            extra={"chain_id": entry.chain_id, "tx_id": tx_id},
            exc_info=exc,
        )
        raise RevealError(
            f"Entry on {entry.chain_id} committed in {tx_id} but reveal failed: {exc}",
            tx_id=tx_id,
            entry_hash=entry.entry_hash,
        ) from exc
    return tx_id
