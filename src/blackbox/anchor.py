"""Submit signed fingerprints as records on an entity's chain."""

from __future__ import annotations

import logging
from pathlib import Path

from .fingerprint import fingerprint_file
from .ledger.base import LedgerClient
from .models import Entry
from .receipts import AnchorReceipt, append_receipt
from .signing import KeyPair
from .submission import submit_entry

__all__ = ["AnchorWriter", "build_anchor_entry"]

LOGGER = logging.getLogger(__name__)


def build_anchor_entry(chain_id: str, fingerprint: bytes, keypair: KeyPair) -> Entry:
    """Return the record anchoring ``fingerprint`` under ``keypair``.

    External IDs are ``(signature, public_key)``; the content is the
    fingerprint itself.
    """

    signature = keypair.sign(fingerprint)
    return Entry(
        chain_id=chain_id,
        ext_ids=(signature, keypair.public_key),
        content=bytes(fingerprint),
    )


class AnchorWriter:
    """Append fingerprint records to chains, at most once per call."""

    def __init__(self, client: LedgerClient) -> None:
        self._client = client

    def anchor(
        self,
        chain_id: str,
        fingerprint: bytes,
        keypair: KeyPair,
        payer: KeyPair | None = None,
    ) -> str:
        """Sign ``fingerprint`` and submit it to ``chain_id``.

        Args:
            chain_id: Target chain.
            fingerprint: Digest to anchor.
            keypair: Owner key pair that signs the fingerprint.
            payer: Key pair paying for the entry; defaults to ``keypair``.

        Returns:
            The commit transaction ID.

        Raises:
            LedgerError: When the commit fails; nothing was appended.
            RevealError: When the commit succeeded but the reveal failed.
        """

        entry = build_anchor_entry(chain_id, fingerprint, keypair)
        return self._submit(entry, payer or keypair)

    def anchor_file(
        self,
        chain_id: str,
        path: str | Path,
        keypair: KeyPair,
        *,
        payer: KeyPair | None = None,
        journal: str | Path | None = None,
    ) -> AnchorReceipt:
        """Fingerprint the file at ``path`` and anchor it.

        When ``journal`` is given the receipt is appended to it after the
        ledger accepted the record.
        """

        digest = fingerprint_file(path)
        entry = build_anchor_entry(chain_id, digest, keypair)
        tx_id = self._submit(entry, payer or keypair)
        receipt = AnchorReceipt(
            chain_id=chain_id,
            entry_hash=entry.entry_hash,
            tx_id=tx_id,
            fingerprint=digest.hex(),
            source_path=str(path),
        )
        if journal is not None:
            append_receipt(journal, receipt)
        return receipt

    def _submit(self, entry: Entry, payer: KeyPair) -> str:
        tx_id = submit_entry(self._client, entry, payer)
        LOGGER.info(
            "Fingerprint anchored",
            extra={
                "chain_id": entry.chain_id,
                "entry_hash": entry.entry_hash,
                "tx_id": tx_id,
                "fingerprint": entry.content.hex(),
            },
        )
        return tx_id
