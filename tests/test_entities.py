"""Tests for driver and vehicle entities."""

import pytest

from blackbox.entities import Person, Vehicle
from blackbox.errors import InvalidIdentifierError
from blackbox.identity import PERSON_NAMESPACE, VEHICLE_NAMESPACE, derive_chain_id
from blackbox.signing import KeyPair

VIN = "1HGCM82633A004352"


def test_vehicle_chain_name_and_id():
    vehicle = Vehicle(VIN)
    assert vehicle.chain_name() == (VEHICLE_NAMESPACE, VIN.encode("ascii"))
    assert vehicle.chain_id == derive_chain_id([VEHICLE_NAMESPACE, VIN.encode()])
    assert Vehicle(VIN).chain_id == vehicle.chain_id


@pytest.mark.parametrize("vin", ["", "SHORT", VIN + "X", "1HGCM82633A00435!", 12345])
def test_vehicle_rejects_malformed_vin(vin):
    with pytest.raises(InvalidIdentifierError):
        Vehicle(vin)


def test_person_chain_uses_public_key(owner: KeyPair):
    person = Person(owner)
    assert person.chain_name() == (PERSON_NAMESPACE, owner.public_key)
    assert person.chain_id == derive_chain_id([PERSON_NAMESPACE, owner.public_key])


def test_distinct_entities_get_distinct_chains(owner: KeyPair, stranger: KeyPair):
    assert Person(owner).chain_id != Person(stranger).chain_id
    assert Vehicle(VIN).chain_id != Vehicle("2HGCM82633A004352").chain_id


def test_owner_is_an_identifier_association(owner: KeyPair, stranger: KeyPair):
    vehicle = Vehicle(VIN)
    assert vehicle.owner_public_key is None

    first = Person(owner)
    vehicle.assign_owner(first)
    assert vehicle.owner is not None
    assert vehicle.owner.chain_id == first.chain_id
    assert vehicle.owner_public_key == owner.public_key
    assert not isinstance(vehicle.owner, Person)

    vehicle.assign_owner(Person(stranger))
    assert vehicle.owner_public_key == stranger.public_key
    assert vehicle.previous_owners == [owner.public_key]


def test_reassigning_same_owner_keeps_history_empty(owner: KeyPair):
    vehicle = Vehicle(VIN)
    vehicle.assign_owner(Person(owner))
    vehicle.assign_owner(Person(owner))
    assert vehicle.previous_owners == []
