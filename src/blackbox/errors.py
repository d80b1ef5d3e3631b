"""Exception hierarchy shared by the anchoring and verification layers."""

from __future__ import annotations

__all__ = [
    "BlackboxError",
    "EntryNotFoundError",
    "InvalidIdentifierError",
    "InvalidRecordError",
    "LedgerError",
    "LedgerUnavailableError",
    "RevealError",
]


class BlackboxError(Exception):
    """Base class for all errors raised by :mod:`blackbox`."""


class InvalidIdentifierError(BlackboxError, ValueError):
    """Raised when entity key material or chain name segments are malformed."""


class InvalidRecordError(BlackboxError, ValueError):
    """Raised when a record cannot be encoded for the ledger."""


class LedgerError(BlackboxError):
    """Raised when the ledger rejects or fails a request.

    Args:
        message: Human readable description.
        code: Optional JSON-RPC error code reported by the node.
    """

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class LedgerUnavailableError(LedgerError):
    """Raised when the ledger endpoint cannot be reached."""


class EntryNotFoundError(LedgerError):
    """Raised when a record identifier does not resolve on the ledger."""


class RevealError(LedgerError):
    """Raised when a commit succeeded but the matching reveal failed.

    The ledger has accepted payment for the record but the record itself is
    not visible. Callers should query the ledger before resubmitting.

    Attributes:
        tx_id: Transaction identifier of the successful commit.
        entry_hash: Hash of the record that was committed.
    """

    def __init__(self, message: str, *, tx_id: str, entry_hash: str) -> None:
        super().__init__(message)
        self.tx_id = tx_id
        self.entry_hash = entry_hash
