"""Tests for Ed25519 signing and verification."""

import random

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from blackbox.signing import (
    SIGNATURE_SIZE,
    KeyPair,
    sign,
    verify_signature,
)

SEED = bytes.fromhex("9f2c4b7a1d08e3f5a6b0c3d4e7f812349abcedf00123456789abcdef01234567")


def test_signature_verifies_with_cryptography():
    keypair = KeyPair(SEED)
    message = b"\x01" * 32
    signature = keypair.sign(message)

    assert len(signature) == SIGNATURE_SIZE
    Ed25519PublicKey.from_public_bytes(keypair.public_key).verify(signature, message)


def test_signing_is_deterministic():
    assert sign(SEED, b"hash") == sign(SEED, b"hash")
    assert KeyPair(SEED).sign(b"hash") == sign(SEED, b"hash")


def test_sign_verify_inverse_for_random_keys_and_messages():
    rng = random.Random(99)
    for _ in range(10):
        keypair = KeyPair(ephemeral=True)
        message = rng.randbytes(rng.randrange(0, 200))
        signature = keypair.sign(message)
        assert verify_signature(keypair.public_key, message, signature)
        assert keypair.verify(message, signature)


def test_single_byte_mutations_fail_verification():
    keypair = KeyPair(SEED)
    message = bytes(range(32))
    signature = keypair.sign(message)

    for index in range(len(message)):
        mutated = bytearray(message)
        mutated[index] ^= 0xFF
        assert not verify_signature(keypair.public_key, bytes(mutated), signature)

    for index in range(0, SIGNATURE_SIZE, 7):
        mutated_sig = bytearray(signature)
        mutated_sig[index] ^= 0x01
        assert not verify_signature(keypair.public_key, message, bytes(mutated_sig))


def test_wrong_key_fails_verification():
    signer = KeyPair(SEED)
    other = KeyPair(bytes(range(32)))
    signature = signer.sign(b"payload")
    assert not verify_signature(other.public_key, b"payload", signature)


@pytest.mark.parametrize(
    "public_key, signature",
    [
        (b"", b"\x00" * 64),
        (b"\x00" * 31, b"\x00" * 64),
        (b"\x11" * 32, b""),
        (b"\x11" * 32, b"\x00" * 63),
        (b"\x11" * 32, b"\x00" * 65),
        ("not-bytes", b"\x00" * 64),
    ],
)
def test_malformed_inputs_return_false(public_key, signature):
    assert verify_signature(public_key, b"message", signature) is False


def test_keypair_requires_seed_unless_ephemeral():
    with pytest.raises(ValueError):
        KeyPair()
    with pytest.raises(ValueError):
        KeyPair(b"short")


def test_keypair_from_hex_accepts_prefix():
    keypair = KeyPair.from_hex("0x" + SEED.hex())
    assert keypair.public_key == KeyPair(SEED).public_key
    assert keypair.public_key_hex == keypair.public_key.hex()
    with pytest.raises(ValueError):
        KeyPair.from_hex("zz")


def test_repr_does_not_leak_seed():
    keypair = KeyPair(SEED)
    assert SEED.hex() not in repr(keypair)
    assert keypair.public_key_hex in repr(keypair)
