"""Tests for chain identifier derivation."""

import hashlib

import pytest

from blackbox.errors import InvalidIdentifierError
from blackbox.identity import PERSON_NAMESPACE, VEHICLE_NAMESPACE, derive_chain_id


def test_chain_id_matches_hash_of_segment_hashes():
    segments = [VEHICLE_NAMESPACE, b"1HGCM82633A004352"]
    expected = hashlib.sha256(
        hashlib.sha256(segments[0]).digest() + hashlib.sha256(segments[1]).digest()
    ).hexdigest()

    assert derive_chain_id(segments) == expected
    assert len(expected) == 64


def test_chain_id_is_deterministic():
    segments = (PERSON_NAMESPACE, bytes(range(32)))
    first = derive_chain_id(segments)
    for _ in range(5):
        assert derive_chain_id(list(segments)) == first


def test_segment_order_is_significant():
    forward = derive_chain_id([b"a", b"b"])
    backward = derive_chain_id([b"b", b"a"])
    assert forward != backward


def test_segment_boundaries_are_significant():
    # Concatenation must not collide: ["ab"] vs ["a", "b"]
    assert derive_chain_id([b"ab"]) != derive_chain_id([b"a", b"b"])


def test_empty_name_is_rejected():
    with pytest.raises(InvalidIdentifierError):
        derive_chain_id([])


def test_non_bytes_segment_is_rejected():
    with pytest.raises(InvalidIdentifierError):
        derive_chain_id([VEHICLE_NAMESPACE, "1HGCM82633A004352"])  # type: ignore[list-item]


def test_invalid_identifier_is_a_value_error():
    with pytest.raises(ValueError):
        derive_chain_id(())
