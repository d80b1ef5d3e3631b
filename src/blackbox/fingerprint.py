"""Content fingerprints for on-disk data blobs."""

from __future__ import annotations

import hashlib
from pathlib import Path

__all__ = ["FINGERPRINT_SIZE", "fingerprint", "fingerprint_file"]

FINGERPRINT_SIZE = 32
_CHUNK_SIZE = 64 * 1024


def fingerprint(data: bytes) -> bytes:
    """Return the SHA-256 digest of ``data``."""

    return hashlib.sha256(data).digest()


def fingerprint_file(path: str | Path) -> bytes:
    """Return the SHA-256 digest of the file at ``path``.

    The file is streamed in fixed-size chunks so large video segments are not
    loaded into memory. ``OSError`` from the read propagates to the caller.
    """

    digest = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.digest()
