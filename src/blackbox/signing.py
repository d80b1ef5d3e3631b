"""
Ed25519 signing helpers for anchored fingerprints.

The same key pair that pays for ledger submissions signs the fingerprints it
anchors, so a record can later be attributed to its owner.

Provides:
- KeyPair(private_key): holds an Ed25519 seed and signs messages
- sign(private_key, message): one-shot signature over raw bytes
- verify_signature(public_key, message, signature): total boolean check
"""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

__all__ = [
    "PUBLIC_KEY_SIZE",
    "SEED_SIZE",
    "SIGNATURE_SIZE",
    "KeyPair",
    "sign",
    "verify_signature",
]

SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64


def _load_private_key(private_key: bytes) -> Ed25519PrivateKey:
    if len(private_key) != SEED_SIZE:
        raise ValueError("private_key must be exactly 32 bytes for Ed25519")
    return Ed25519PrivateKey.from_private_bytes(bytes(private_key))


def sign(private_key: bytes, message: bytes) -> bytes:
    """Return the 64-byte Ed25519 signature of ``message``.

    Raises:
        ValueError: If ``private_key`` is not a 32-byte seed.
    """

    return _load_private_key(private_key).sign(message)


def verify_signature(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """Check an Ed25519 signature.

    Never raises: a wrong-length key or signature, a key that does not decode
    and a signature that does not match all return ``False``.
    """

    if not isinstance(public_key, (bytes, bytearray)) or len(public_key) != PUBLIC_KEY_SIZE:
        return False
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_SIZE:
        return False
    try:
        pub = Ed25519PublicKey.from_public_bytes(bytes(public_key))
        pub.verify(bytes(signature), bytes(message))
    except (InvalidSignature, ValueError, TypeError):
        return False
    return True


class KeyPair:
    """
    Ed25519 key pair used both to sign fingerprints and to pay for entries.

    Args:
    ----
        private_key: Optional 32-byte seed. When ``None`` a random seed is
            generated if ``ephemeral=True``; otherwise a :class:`ValueError`
            is raised.
        ephemeral: If ``True``, allows generating a throwaway key for testing.

    Attributes:
    ----------
        public_key: Raw 32-byte public key.
        public_key_hex: Hex rendering of ``public_key``.

    """

    def __init__(
        self, private_key: bytes | None = None, ephemeral: bool = False
    ) -> None:
        if private_key is None:
            if not ephemeral:
                raise ValueError(
                    "private_key is required. Provide a stable seed for anchoring, "
                    "or set ephemeral=True for testing."
                )
            private_key = os.urandom(SEED_SIZE)
        self._seed = bytes(private_key)
        self._priv = _load_private_key(self._seed)
        self.public_key = self._priv.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self.public_key_hex = self.public_key.hex()

    @classmethod
    def from_hex(cls, seed_hex: str) -> KeyPair:
        """Build a key pair from a hex seed, allowing an optional ``0x`` prefix."""

        value = seed_hex.strip()
        if value[:2] in ("0x", "0X"):
            value = value[2:]
        try:
            seed = bytes.fromhex(value)
        except ValueError as exc:
            raise ValueError("Secret key must be hex encoded") from exc
        return cls(seed)

    def sign(self, message: bytes) -> bytes:
        """Return the Ed25519 signature of ``message`` under this key."""

        return sign(self._seed, message)

    def verify(self, message: bytes, signature: bytes) -> bool:
        return verify_signature(self.public_key, message, signature)

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key_hex!r})"
