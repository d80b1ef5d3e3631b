"""Async pipeline running acquisition concurrently with anchoring."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from pathlib import Path

from blackbox.acquisition import BlobSource
from blackbox.anchor import AnchorWriter
from blackbox.receipts import AnchorReceipt
from blackbox.signing import KeyPair

LOGGER = logging.getLogger(__name__)

_DONE = None


@dataclass(slots=True)
class AnchoringPipeline:
    """Capture blobs and anchor each one on a single chain.

    A producer task captures blobs in a worker thread and hands their paths
    to a single consumer through a bounded queue, so anchoring for the chain
    is serialized in capture order. When the queue is full the producer waits.

    An anchoring failure stops the pipeline and is raised from :meth:`run`;
    the failed blob is not retried.
    """

    source: BlobSource
    writer: AnchorWriter
    chain_id: str
    keypair: KeyPair
    payer: KeyPair | None = None
    journal: Path | None = None
    queue_size: int = 4
    logger: logging.Logger = field(default=LOGGER)
    receipts: list[AnchorReceipt] = field(init=False, default_factory=list)

    async def run(self, segments: int) -> list[AnchorReceipt]:
        """Capture and anchor ``segments`` blobs.

        Args:
            segments: Number of blobs to capture.

        Returns:
            Receipts for the blobs anchored by this call, in capture order.
            ``receipts`` holds the same receipts, including partial progress when
            the run fails.
        """

        if segments < 0:
            raise ValueError("segments must not be negative")
        if self.queue_size < 1:
            raise ValueError("queue_size must be at least 1")

        self.receipts = []

        queue: asyncio.Queue[Path | None] = asyncio.Queue(maxsize=self.queue_size)
        producer = asyncio.create_task(
            self._produce(queue, segments), name="blackbox-acquire"
        )
        consumer = asyncio.create_task(self._consume(queue), name="blackbox-anchor")

        try:
            await asyncio.gather(producer, consumer)
        except BaseException:
            for task in (producer, consumer):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            raise
        return list(self.receipts)

    async def _produce(self, queue: asyncio.Queue[Path | None], segments: int) -> None:
        for index in range(segments):
            path = await asyncio.to_thread(self.source.capture)
            self.logger.debug(
                "Blob captured", extra={"path": str(path), "segment": index}
            )
            await queue.put(path)
        await queue.put(_DONE)

    async def _consume(self, queue: asyncio.Queue[Path | None]) -> None:
        while True:
            path = await queue.get()
            if path is _DONE:
                return
            try:
                receipt = await asyncio.to_thread(
                    self.writer.anchor_file,
                    self.chain_id,
                    path,
                    self.keypair,
                    payer=self.payer,
                    journal=self.journal,
                )
            except Exception:
                self.logger.error(
                    "Anchoring failed",
                    extra={"chain_id": self.chain_id, "path": str(path)},
                    exc_info=True,
                )
                raise
            self.receipts.append(receipt)
            self.logger.info(
                "Blob secured",
                extra={
                    "chain_id": self.chain_id,
                    "path": str(path),
                    "tx_id": receipt.tx_id,
                },
            )
