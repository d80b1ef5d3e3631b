"""Tests for file fingerprints."""

import hashlib
import random
from pathlib import Path

import pytest

from blackbox.fingerprint import FINGERPRINT_SIZE, fingerprint, fingerprint_file


def test_fingerprint_is_sha256():
    assert fingerprint(b"telemetry") == hashlib.sha256(b"telemetry").digest()
    assert len(fingerprint(b"")) == FINGERPRINT_SIZE


def test_file_fingerprint_is_stable(tmp_path: Path):
    blob = tmp_path / "segment.txt"
    blob.write_bytes(b"Engine RPM: 2100\n" * 100)

    first = fingerprint_file(blob)
    assert fingerprint_file(blob) == first
    assert fingerprint_file(str(blob)) == first
    assert first == fingerprint(blob.read_bytes())


def test_large_file_streams_to_same_digest(tmp_path: Path):
    data = random.Random(7).randbytes(300_000)
    blob = tmp_path / "video.h264"
    blob.write_bytes(data)

    assert fingerprint_file(blob) == hashlib.sha256(data).digest()


def test_any_byte_change_changes_fingerprint(tmp_path: Path):
    rng = random.Random(1234)
    data = bytearray(rng.randbytes(4096))
    blob = tmp_path / "segment.bin"
    blob.write_bytes(bytes(data))
    original = fingerprint_file(blob)

    for _ in range(20):
        mutated = bytearray(data)
        index = rng.randrange(len(mutated))
        mutated[index] ^= 1 << rng.randrange(8)
        blob.write_bytes(bytes(mutated))
        assert fingerprint_file(blob) != original


def test_missing_file_raises_os_error(tmp_path: Path):
    with pytest.raises(OSError):
        fingerprint_file(tmp_path / "missing.txt")
