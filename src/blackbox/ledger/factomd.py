"""JSON-RPC client for a factomd v2 API endpoint."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from blackbox.errors import EntryNotFoundError, LedgerError, LedgerUnavailableError
from blackbox.ledger.base import LedgerClient
from blackbox.ledger.commit import build_chain_commit, build_entry_commit
from blackbox.ledger.schemas import (
    ZERO_KEYMR,
    ChainHeadPayload,
    CommitPayload,
    EntryBlockPayload,
    EntryPayload,
    RevealPayload,
)
from blackbox.models import Chain, Entry
from blackbox.settings import BlackboxSettings, get_settings
from blackbox.signing import KeyPair

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MISSING_CHAIN_HEAD = -32009
ENTRY_NOT_FOUND = -32008


class FactomdClient(LedgerClient):
    """Talk to a factomd node over HTTP JSON-RPC 2.0.

    Commit messages are built and signed locally, so no wallet daemon is
    needed. A fresh :class:`httpx.Client` bounded by ``timeout_seconds`` is
    used for every call.
    """

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout_seconds: float | None = None,
        settings: BlackboxSettings | None = None,
    ) -> None:
        settings_obj = settings or get_settings()
        self._url = (url or settings_obj.factomd_url).rstrip("/")
        self._timeout = (
            timeout_seconds if timeout_seconds is not None else settings_obj.ledger_timeout
        )
        self._settings = settings_obj

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    def with_timeout(self, timeout_seconds: float) -> FactomdClient:
        """Return a client for the same node with a different call timeout."""

        return FactomdClient(
            self._url, timeout_seconds=timeout_seconds, settings=self._settings
        )

    def chain_exists(self, chain_id: str) -> bool:
        try:
            self._chain_head(chain_id)
        except LedgerError as exc:
            if exc.code == MISSING_CHAIN_HEAD:
                return False
            raise
        return True

    def commit_chain(self, chain: Chain, payer: KeyPair) -> str:
        message = build_chain_commit(chain, payer)
        result = self._call("commit-chain", {"message": message.hex()})
        commit = self._parse(CommitPayload, result, "commit-chain")
        LOGGER.info(
            "Chain committed",
            extra={"chain_id": chain.chain_id, "tx_id": commit.txid},
        )
        return commit.txid

    def reveal_chain(self, chain: Chain) -> str:
        result = self._call("reveal-chain", {"entry": chain.first_entry.marshal().hex()})
        reveal = self._parse(RevealPayload, result, "reveal-chain")
        LOGGER.info(
            "Chain revealed",
            extra={"chain_id": chain.chain_id, "entry_hash": reveal.entryhash},
        )
        return reveal.entryhash

    def commit_entry(self, entry: Entry, payer: KeyPair) -> str:
        message = build_entry_commit(entry, payer)
        result = self._call("commit-entry", {"message": message.hex()})
        commit = self._parse(CommitPayload, result, "commit-entry")
        LOGGER.info(
            "Entry committed",
            extra={"chain_id": entry.chain_id, "tx_id": commit.txid},
        )
        return commit.txid

    def reveal_entry(self, entry: Entry) -> str:
        result = self._call("reveal-entry", {"entry": entry.marshal().hex()})
        reveal = self._parse(RevealPayload, result, "reveal-entry")
        LOGGER.info(
            "Entry revealed",
            extra={"chain_id": entry.chain_id, "entry_hash": reveal.entryhash},
        )
        return reveal.entryhash

    def get_all_chain_entries(self, chain_id: str) -> list[Entry]:
        """Walk entry blocks from the chain head back to the first block.

        Entries that are only in the process list are not yet visible and
        are not returned.
        """

        head = self._chain_head(chain_id)
        if not head.chainhead:
            LOGGER.debug(
                "Chain head still in process list",
                extra={"chain_id": chain_id},
            )
            return []

        blocks: list[list[Entry]] = []
        keymr = head.chainhead
        while keymr and keymr != ZERO_KEYMR:
            result = self._call("entry-block", {"keymr": keymr})
            block = self._parse(EntryBlockPayload, result, "entry-block")
            blocks.append([self.get_entry(item.entryhash) for item in block.entrylist])
            keymr = block.header.prevkeymr

        entries: list[Entry] = []
        for block_entries in reversed(blocks):
            entries.extend(block_entries)
        return entries

    def get_entry(self, entry_hash: str) -> Entry:
        try:
            result = self._call("entry", {"hash": entry_hash})
        except LedgerError as exc:
            if exc.code == ENTRY_NOT_FOUND:
                raise EntryNotFoundError(
                    f"Entry {entry_hash} not found", code=exc.code
                ) from exc
            raise
        return self._parse(EntryPayload, result, "entry").to_entry()

    def _chain_head(self, chain_id: str) -> ChainHeadPayload:
        result = self._call("chain-head", {"chainid": chain_id})
        return self._parse(ChainHeadPayload, result, "chain-head")

    def _call(self, method: str, params: dict[str, Any]) -> Any:
        """Issue one JSON-RPC request and return its ``result`` member.

        Raises:
            LedgerUnavailableError: On transport failures or HTTP errors
                without a JSON-RPC error body.
            LedgerError: When the node reports a JSON-RPC error.
        """

        request = {"jsonrpc": "2.0", "id": 0, "method": method, "params": params}
        LOGGER.debug("factomd request", extra={"method": method, "url": self._url})
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(self._url, json=request)
        except httpx.TimeoutException as exc:
            LOGGER.warning(
                "factomd request timed out",
                extra={"method": method, "url": self._url, "timeout": self._timeout},
                exc_info=exc,
            )
            raise LedgerUnavailableError(
                f"factomd {method} timed out after {self._timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "factomd transport error",
                extra={"method": method, "url": self._url},
                exc_info=exc,
            )
            raise LedgerUnavailableError(f"factomd {method} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            self._check_status(response, method)
            raise LedgerError(f"factomd {method} returned a non-JSON response") from exc
        if not isinstance(payload, dict):
            self._check_status(response, method)
            raise LedgerError(f"factomd {method} returned a non-object response")

        error = payload.get("error")
        if error is not None:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise LedgerError(
                f"factomd {method} error: {message}",
                code=code if isinstance(code, int) else None,
            )

        self._check_status(response, method)
        if "result" not in payload:
            raise LedgerError(f"factomd {method} response has no result")
        return payload["result"]

    def _check_status(self, response: httpx.Response, method: str) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            LOGGER.warning(
                "factomd HTTP error",
                extra={
                    "method": method,
                    "url": self._url,
                    "status_code": exc.response.status_code,
                },
                exc_info=exc,
            )
            raise LedgerUnavailableError(
                f"factomd {method} returned HTTP {exc.response.status_code}"
            ) from exc

    @staticmethod
    def _parse(model: type[ModelT], result: Any, method: str) -> ModelT:
        try:
            return model.model_validate(result)
        except ValidationError as exc:
            raise LedgerError(
                f"factomd {method} result does not match the expected schema"
            ) from exc
