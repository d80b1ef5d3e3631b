"""Verify that a local file matches a fingerprint anchored on a chain."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .errors import EntryNotFoundError
from .fingerprint import fingerprint_file
from .ledger.base import LedgerClient
from .models import Entry
from .signing import SIGNATURE_SIZE, verify_signature

__all__ = ["IntegrityVerifier", "record_vouches_for"]

LOGGER = logging.getLogger(__name__)


def record_vouches_for(entry: Entry, fingerprint: bytes, owner_public_key: bytes) -> bool:
    """Return ``True`` if ``entry`` is an owner-signed anchor of ``fingerprint``.

    Checks run cheapest first: shape of the external IDs, then the embedded
    public key, then the signature over the record content, and finally the
    content against ``fingerprint``.
    """

    if len(entry.ext_ids) != 2:
        return False
    signature, public_key = entry.ext_ids
    if len(signature) != SIGNATURE_SIZE:
        return False
    if public_key != owner_public_key:
        return False
    if not verify_signature(owner_public_key, entry.content, signature):
        return False
    return entry.content == fingerprint


class IntegrityVerifier:
    """Scan ledger history for an anchor matching a local file."""

    def __init__(self, client: LedgerClient) -> None:
        self._client = client

    def find_match(
        self, chain_id: str, path: str | Path, owner_public_key: bytes
    ) -> Entry | None:
        """Return the first owner-signed record anchoring the file's fingerprint.

        The full history is fetched before the file is read; errors from
        either step propagate. Malformed, foreign and badly signed records
        are skipped.
        """

        history = self._client.get_all_chain_entries(chain_id)
        local = fingerprint_file(path)
        match = _first_match(history, local, owner_public_key)
        LOGGER.info(
            "Chain scanned",
            extra={
                "chain_id": chain_id,
                "records": len(history),
                "fingerprint": local.hex(),
                "verified": match is not None,
            },
        )
        return match

    def verify(self, chain_id: str, path: str | Path, owner_public_key: bytes) -> bool:
        """Return ``True`` if the file at ``path`` is anchored on ``chain_id``.

        ``False`` is the normal negative outcome, not an error.
        """

        return self.find_match(chain_id, path, owner_public_key) is not None

    def check_record(
        self, path: str | Path, record_id: str, owner_public_key: bytes
    ) -> bool:
        """Check the file at ``path`` against a single known record.

        Applies the same checks as :meth:`verify` to the record addressed by
        ``record_id``. An unknown record is a negative outcome; other ledger
        errors propagate.
        """

        local = fingerprint_file(path)
        try:
            entry = self._client.get_entry(record_id)
        except EntryNotFoundError:
            LOGGER.info(
                "Record not found",
                extra={"entry_hash": record_id, "verified": False},
            )
            return False
        verified = record_vouches_for(entry, local, owner_public_key)
        LOGGER.info(
            "Record checked",
            extra={"entry_hash": record_id, "verified": verified},
        )
        return verified


def _first_match(
    history: Iterable[Entry], fingerprint: bytes, owner_public_key: bytes
) -> Entry | None:
    for entry in history:
        if record_vouches_for(entry, fingerprint, owner_public_key):
            return entry
    return None
