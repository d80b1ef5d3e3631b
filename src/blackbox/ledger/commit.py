"""Signed commit messages that pay for chain and entry submissions."""

from __future__ import annotations

import hashlib
import struct
import time

from blackbox.models import ENTRY_HEADER_SIZE, Chain, Entry
from blackbox.signing import KeyPair

__all__ = [
    "CHAIN_CREATION_COST",
    "build_chain_commit",
    "build_entry_commit",
    "entry_cost",
]

COMMIT_VERSION = 0
CHAIN_CREATION_COST = 10


def _sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def _millis(timestamp_ms: int | None) -> bytes:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    # 6-byte big-endian millisecond timestamp
    return struct.pack(">Q", timestamp_ms)[2:]


def entry_cost(entry: Entry) -> int:
    """Return the entry credit cost of ``entry``: one per started KiB, minimum one."""

    size = len(entry.marshal()) - ENTRY_HEADER_SIZE
    kib, remainder = divmod(size, 1024)
    if remainder:
        kib += 1
    return max(kib, 1)


def build_entry_commit(
    entry: Entry, payer: KeyPair, *, timestamp_ms: int | None = None
) -> bytes:
    """Return the signed commit message for ``entry``."""

    body = (
        struct.pack(">B", COMMIT_VERSION)
        + _millis(timestamp_ms)
        + bytes.fromhex(entry.entry_hash)
        + struct.pack(">B", entry_cost(entry))
    )
    return body + payer.public_key + payer.sign(body)


def build_chain_commit(
    chain: Chain, payer: KeyPair, *, timestamp_ms: int | None = None
) -> bytes:
    """Return the signed commit message for creating ``chain``."""

    entry = chain.first_entry
    entry_hash = bytes.fromhex(entry.entry_hash)
    chain_id = bytes.fromhex(chain.chain_id)
    body = (
        struct.pack(">B", COMMIT_VERSION)
        + _millis(timestamp_ms)
        + _sha256d(chain_id)
        + _sha256d(entry_hash + chain_id)
        + entry_hash
        + struct.pack(">B", entry_cost(entry) + CHAIN_CREATION_COST)
    )
    return body + payer.public_key + payer.sign(body)
