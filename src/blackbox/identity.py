"""Deterministic chain identifier derivation."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence

from .errors import InvalidIdentifierError

__all__ = [
    "PERSON_NAMESPACE",
    "VEHICLE_NAMESPACE",
    "derive_chain_id",
]

PERSON_NAMESPACE = b"Driver Identity Chain"
VEHICLE_NAMESPACE = b"Vehicle Identity Chain"


def derive_chain_id(segments: Sequence[bytes]) -> str:
    """Return the chain identifier for an ordered chain name.

    The identifier is ``SHA256(SHA256(s0) || SHA256(s1) || ...)`` rendered as
    lowercase hex. Segment order is significant.

    Args:
        segments: Ordered name segments. The first is the namespace label and
            the rest are entity key material.

    Returns:
        64 character hex chain identifier.

    Raises:
        InvalidIdentifierError: If ``segments`` is empty or holds non-bytes.
    """

    if not segments:
        raise InvalidIdentifierError("Chain name must contain at least one segment")

    outer = hashlib.sha256()
    for index, segment in enumerate(segments):
        if not isinstance(segment, (bytes, bytearray)):
            raise InvalidIdentifierError(
                f"Chain name segment {index} must be bytes, "
                f"got {type(segment).__name__}"
            )
        outer.update(hashlib.sha256(bytes(segment)).digest())
    return outer.hexdigest()
