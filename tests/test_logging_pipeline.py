"""Tests for structured logging pipeline utilities."""

from __future__ import annotations

import io
import json
import logging
import sys
from logging.handlers import QueueListener
from queue import Queue
from typing import Any, cast

import pytest

from blackbox import logging_pipeline


def test_configure_structured_logging_emits_json() -> None:
    """Configure structured logging and verify JSON payloads are emitted."""

    logger = logging.getLogger("blackbox-test")
    listener = logging_pipeline.configure_structured_logging(
        logger, session_id="drive-123", level=logging.INFO
    )

    assert listener.handlers
    stream_handler = cast(logging.StreamHandler[Any], listener.handlers[0])
    buffer = io.StringIO()
    stream_handler.setStream(buffer)

    logger.info(
        "Blob secured", extra={"chain_id": "ab" * 32, "signature": b"\x01\x02"}
    )
    logging_pipeline.shutdown_listeners([listener])

    payload = json.loads(buffer.getvalue().strip())
    assert payload["message"] == "Blob secured"
    assert payload["level"] == "INFO"
    assert payload["session_id"] == "drive-123"
    assert payload["context"]["chain_id"] == "ab" * 32
    assert payload["context"]["signature"] == "0102"
    assert "levelname" not in payload["context"]


def test_configure_structured_logging_generates_session_id() -> None:
    """When the session ID is omitted a random identifier should be emitted."""

    logger = logging.getLogger("blackbox-auto-session")
    listener = logging_pipeline.configure_structured_logging(logger)

    stream_handler = listener.handlers[0]
    buffer = io.StringIO()
    stream_handler.setStream(buffer)

    logger.info("auto-session")
    logging_pipeline.shutdown_listeners([listener])

    payload = json.loads(buffer.getvalue())
    assert payload["session_id"]
    assert isinstance(payload["session_id"], str)
    assert payload["message"] == "auto-session"


def test_formatter_includes_exception_text() -> None:
    formatter = logging_pipeline.JsonFormatter(session_id="s")
    try:
        raise RuntimeError("ledger down")
    except RuntimeError:
        record = logging.getLogger("x").makeRecord(
            "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )

    payload = json.loads(formatter.format(record))
    assert "ledger down" in payload["exception"]


def test_bounded_queue_handler_drops_when_full() -> None:
    record_queue: Queue[logging.LogRecord] = Queue(maxsize=1)
    handler = logging_pipeline.BoundedQueueHandler(record_queue)
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

    handler.enqueue(record)
    handler.enqueue(record)

    assert record_queue.qsize() == 1


def test_shutdown_listeners_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    """Listener shutdown failures should emit warnings."""

    class _FailingListener(QueueListener):
        def __init__(self) -> None:
            super().__init__(Queue(), logging.StreamHandler())

        def stop(self) -> None:
            raise RuntimeError("stop failure")

    failing_listener = _FailingListener()

    with caplog.at_level(logging.WARNING):
        logging_pipeline.shutdown_listeners([failing_listener])

    assert "Failed to stop logging listener" in caplog.text
