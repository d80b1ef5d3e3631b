"""
Local NDJSON journal of anchoring receipts.

Each line records one successful anchoring: the chain, the ledger's entry
hash (usable for point-lookup verification), the commit transaction ID and the
fingerprint that was anchored. Appends take an exclusive ``portalocker`` lock
on a sidecar ``.lock`` file so concurrent recorders never interleave lines.
The journal is a convenience index; the ledger stays the source of truth.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

import portalocker
from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = ["AnchorReceipt", "append_receipt", "find_receipt", "load_receipts"]

LOGGER = logging.getLogger(__name__)


class AnchorReceipt(BaseModel):
    """Immutable record of one anchored fingerprint."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    chain_id: str = Field(..., min_length=64, max_length=64)
    entry_hash: str = Field(
        ...,
        min_length=64,
        max_length=64,
        description="Ledger record identifier of the anchored entry.",
    )
    tx_id: str = Field(..., min_length=1, description="Commit transaction ID.")
    fingerprint: str = Field(
        ...,
        min_length=64,
        max_length=64,
        description="Hex SHA-256 fingerprint that was anchored.",
    )
    source_path: str | None = Field(
        default=None, description="Local blob the fingerprint was computed from."
    )
    anchored_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the anchoring call returned (UTC).",
    )


@contextmanager
def _journal_lock(journal_path: Path) -> Iterator[IO[bytes]]:
    lock_path = journal_path.with_suffix(journal_path.suffix + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with lock_path.open("a+b") as lock_fp:
        portalocker.lock(lock_fp, portalocker.LOCK_EX)
        try:
            yield lock_fp
        finally:
            portalocker.unlock(lock_fp)


def append_receipt(journal_path: str | Path, receipt: AnchorReceipt) -> None:
    """Append ``receipt`` as one JSON line and flush it to disk."""

    path = Path(journal_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    line = receipt.model_dump_json().encode("utf-8") + b"\n"
    with _journal_lock(path):
        with path.open("ab") as journal:
            journal.write(line)
            journal.flush()
            try:
                os.fsync(journal.fileno())
            except OSError as exc:
                LOGGER.warning(
                    "Failed to fsync receipt journal",
                    extra={"error": str(exc), "journal": str(path)},
                )


def load_receipts(journal_path: str | Path) -> list[AnchorReceipt]:
    """Return every readable receipt in the journal, oldest first.

    A missing journal yields an empty list. Lines that do not parse are
    skipped with a warning.
    """

    path = Path(journal_path)
    if not path.exists():
        return []

    receipts: list[AnchorReceipt] = []
    with path.open("r", encoding="utf-8") as journal:
        for line_number, line in enumerate(journal, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                receipts.append(AnchorReceipt.model_validate_json(line))
            except ValidationError as exc:
                LOGGER.warning(
                    "Skipping unreadable receipt",
                    extra={"journal": str(path), "line": line_number, "error": str(exc)},
                )
    return receipts


def find_receipt(journal_path: str | Path, fingerprint_hex: str) -> AnchorReceipt | None:
    """Return the most recent receipt for ``fingerprint_hex``, if any."""

    wanted = fingerprint_hex.lower()
    for receipt in reversed(load_receipts(journal_path)):
        if receipt.fingerprint == wanted:
            return receipt
    return None
