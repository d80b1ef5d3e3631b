"""Ledger record types and their binary encoding."""

from __future__ import annotations

import hashlib
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field

from .errors import InvalidRecordError
from .identity import derive_chain_id

__all__ = [
    "ENTRY_HEADER_SIZE",
    "MAX_ENTRY_PAYLOAD",
    "Chain",
    "Entry",
]

ENTRY_HEADER_SIZE = 35
"""Version byte, 32-byte chain ID and the 2-byte ext-id size field."""

MAX_ENTRY_PAYLOAD = 10240


@dataclass(frozen=True, slots=True)
class Entry:
    """One immutable record on a chain.

    Attributes:
        chain_id: Hex identifier of the owning chain.
        ext_ids: Ordered external IDs. Anchored fingerprints carry
            ``(signature, public_key)``.
        content: Record payload; the fingerprint for anchored records.
    """

    chain_id: str
    ext_ids: tuple[bytes, ...] = field(default_factory=tuple)
    content: bytes = b""

    def marshal(self) -> bytes:
        """Return the canonical binary form used for hashing and reveals.

        Raises:
            InvalidRecordError: If the chain ID is not 32 bytes of hex or the
                payload exceeds the ledger's size limit.
        """

        try:
            chain_bytes = bytes.fromhex(self.chain_id)
        except ValueError as exc:
            raise InvalidRecordError(f"Chain ID is not hex: {self.chain_id!r}") from exc
        if len(chain_bytes) != 32:
            raise InvalidRecordError("Chain ID must be 32 bytes")

        ext_blob = bytearray()
        for ext_id in self.ext_ids:
            ext_blob += struct.pack(">H", len(ext_id))
            ext_blob += ext_id
        if len(ext_blob) > 0xFFFF:
            raise InvalidRecordError("External IDs exceed 65535 bytes")

        data = (
            b"\x00"
            + chain_bytes
            + struct.pack(">H", len(ext_blob))
            + bytes(ext_blob)
            + self.content
        )
        if len(data) - ENTRY_HEADER_SIZE > MAX_ENTRY_PAYLOAD:
            raise InvalidRecordError(
                f"Entry payload exceeds {MAX_ENTRY_PAYLOAD} bytes"
            )
        return data

    @property
    def entry_hash(self) -> str:
        """Record identifier: ``SHA256(SHA512(data) || data)`` in hex."""

        data = self.marshal()
        return hashlib.sha256(hashlib.sha512(data).digest() + data).hexdigest()


@dataclass(frozen=True, slots=True)
class Chain:
    """A chain addressed by the identity derived from its first entry."""

    first_entry: Entry

    @classmethod
    def from_name(cls, segments: Sequence[bytes], content: bytes = b"") -> Chain:
        """Build the creation record for a chain named by ``segments``."""

        ext_ids = tuple(bytes(segment) for segment in segments)
        chain_id = derive_chain_id(ext_ids)
        return cls(first_entry=Entry(chain_id=chain_id, ext_ids=ext_ids, content=content))

    @property
    def chain_id(self) -> str:
        return self.first_entry.chain_id
