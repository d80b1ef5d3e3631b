#!/usr/bin/env python3
"""
Offline Recording Session Example

This example demonstrates:
- Registering a vehicle identity chain
- Recording telemetry segments and anchoring them as they close
- Verifying a segment by chain scan and by record lookup
- Detecting a tampered segment

Everything runs against the in-memory ledger, so no factomd node is needed.
"""

import asyncio
import itertools
import logging
import tempfile
from pathlib import Path

from blackbox.acquisition import TelemetrySegmentWriter
from blackbox.anchor import AnchorWriter
from blackbox.entities import Person, Vehicle
from blackbox.integrity import IntegrityVerifier
from blackbox.ledger import InMemoryLedger
from blackbox.logging_pipeline import configure_structured_logging, shutdown_listeners
from blackbox.pipeline import AnchoringPipeline
from blackbox.registrar import Registrar
from blackbox.signing import KeyPair


def fake_obd_reader():
    """Return a reader producing plausible speed and RPM values."""
    ticks = itertools.count()

    def read():
        tick = next(ticks)
        return {"Speed": f"{40 + tick % 7} kph", "RPM": 1500 + 25 * tick}

    return read


def demonstrate_session(workdir: Path):
    print("Vehicle Blackbox Session Example")
    print("=" * 40)

    ledger = InMemoryLedger()
    driver_key = KeyPair(bytes(range(32)))
    driver = Person(driver_key)
    vehicle = Vehicle("1HGCM82633A004352")
    vehicle.assign_owner(driver)

    registrar = Registrar(ledger, driver_key)
    registrar.register(driver)
    registrar.register(vehicle)
    print(f"Vehicle chain: {vehicle.chain_id}")

    writer = TelemetrySegmentWriter(
        fake_obd_reader(),
        workdir / "segments",
        samples_per_segment=5,
        interval_seconds=0.0,
    )
    pipeline = AnchoringPipeline(
        source=writer,
        writer=AnchorWriter(ledger),
        chain_id=vehicle.chain_id,
        keypair=driver_key,
        journal=workdir / "receipts.ndjson",
    )
    receipts = asyncio.run(pipeline.run(3))
    for receipt in receipts:
        print(f"Anchored {Path(receipt.source_path).name} (tx {receipt.tx_id[:16]}...)")

    verifier = IntegrityVerifier(ledger)
    first = receipts[0]
    print("Scan verification:", verifier.verify(vehicle.chain_id, first.source_path, driver.public_key))
    print(
        "Record verification:",
        verifier.check_record(first.source_path, first.entry_hash, driver.public_key),
    )

    with Path(first.source_path).open("a", encoding="utf-8") as handle:
        handle.write("Speed: 12 kph\n")
    print("After tampering:", verifier.verify(vehicle.chain_id, first.source_path, driver.public_key))


if __name__ == "__main__":
    listener = configure_structured_logging(logging.getLogger("blackbox"), level=logging.WARNING)
    try:
        with tempfile.TemporaryDirectory() as tmp:
            demonstrate_session(Path(tmp))
    finally:
        shutdown_listeners([listener])
