"""JSON log output for long-running recording sessions."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from queue import Full, Queue
from typing import Iterable
from uuid import uuid4

from typing_extensions import override

LOGGER = logging.getLogger(__name__)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}

_BYTES_PREVIEW = 64


def _jsonable(value: object) -> object:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value[:_BYTES_PREVIEW]).hex()
    return value


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line.

    ``extra`` fields such as ``chain_id`` or ``tx_id`` are collected under
    ``context``; bytes are rendered as hex.
    """

    def __init__(self, *, session_id: str | None = None) -> None:
        super().__init__()
        self._session_id = session_id

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        context = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key != "session_id"
        }
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "session_id": getattr(record, "session_id", None) or self._session_id,
            "context": context,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exception"] = record.exc_text
        return json.dumps(payload, default=str)


class BoundedQueueHandler(logging.handlers.QueueHandler):
    """Queue handler that never blocks the recorder; full queues drop records."""

    @override
    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except Full:
            self.handleError(record)

    @override
    def handleError(self, record: logging.LogRecord) -> None:
        return


def configure_structured_logging(
    logger: logging.Logger,
    *,
    session_id: str | None = None,
    level: int = logging.INFO,
    queue_size: int = 1024,
) -> logging.handlers.QueueListener:
    """Attach JSON output to ``logger`` through a bounded queue.

    Args:
        logger: Target logger, usually ``logging.getLogger("blackbox")``.
        session_id: Identifier stamped on every record; a random UUID is
            used when omitted.
        level: Logging verbosity level.
        queue_size: Records buffered before new ones are dropped.

    Returns:
        The started listener; pass it to :func:`shutdown_listeners` on exit.
    """
    logger.setLevel(level)

    record_queue: Queue[logging.LogRecord] = Queue(maxsize=queue_size)
    logger.addHandler(BoundedQueueHandler(record_queue))

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(JsonFormatter(session_id=session_id or str(uuid4())))

    listener = logging.handlers.QueueListener(record_queue, stream_handler)
    listener.start()
    return listener


def shutdown_listeners(listeners: Iterable[logging.handlers.QueueListener]) -> None:
    """Stop queue listeners, logging rather than raising on failure."""
    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover - defensive logging cleanup
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)
