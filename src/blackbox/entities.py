"""Entities that own ledger chains: drivers and vehicles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .errors import InvalidIdentifierError
from .identity import PERSON_NAMESPACE, VEHICLE_NAMESPACE, derive_chain_id
from .signing import KeyPair

__all__ = ["VIN_LENGTH", "Entity", "Person", "Vehicle", "VehicleOwner"]

VIN_LENGTH = 17


class Entity(ABC):
    """Something that can be identified, registered and own chains."""

    @property
    @abstractmethod
    def namespace(self) -> bytes:
        """Fixed namespace label prefixed to the chain name."""

    @property
    @abstractmethod
    def key_material(self) -> bytes:
        """Unique, stable identifier bytes for this entity."""

    def chain_name(self) -> tuple[bytes, ...]:
        """Ordered chain name segments used for derivation and registration."""

        return (self.namespace, self.key_material)

    @property
    def chain_id(self) -> str:
        """Chain identifier, re-derived from the chain name on each access."""

        return derive_chain_id(self.chain_name())


class Person(Entity):
    """A driver identified by the public half of their key pair."""

    def __init__(self, keypair: KeyPair) -> None:
        if not keypair.public_key:
            raise InvalidIdentifierError("Person key material must not be empty")
        self.keypair = keypair

    @property
    def namespace(self) -> bytes:
        return PERSON_NAMESPACE

    @property
    def key_material(self) -> bytes:
        return self.keypair.public_key

    @property
    def public_key(self) -> bytes:
        return self.keypair.public_key

    def __repr__(self) -> str:
        return f"Person(chain_id={self.chain_id!r})"


@dataclass(slots=True)
class VehicleOwner:
    """Non-owning reference to a vehicle's current owner."""

    chain_id: str
    public_key: bytes


@dataclass
class Vehicle(Entity):
    """A vehicle identified by its 17 character VIN.

    The owner is recorded by chain ID and public key only; the vehicle never
    holds the owner's :class:`Person` object.
    """

    vin: str
    owner: VehicleOwner | None = None
    previous_owners: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.vin, str) or len(self.vin) != VIN_LENGTH:
            raise InvalidIdentifierError(
                f"VIN must be exactly {VIN_LENGTH} characters"
            )
        if not self.vin.isascii() or not self.vin.isalnum():
            raise InvalidIdentifierError("VIN must be ASCII alphanumeric")

    @property
    def namespace(self) -> bytes:
        return VEHICLE_NAMESPACE

    @property
    def key_material(self) -> bytes:
        return self.vin.encode("ascii")

    def assign_owner(self, person: Person) -> None:
        """Record ``person`` as the current owner.

        The outgoing owner's public key is appended to ``previous_owners``.
        """

        if self.owner is not None and self.owner.public_key != person.public_key:
            self.previous_owners.append(self.owner.public_key)
        self.owner = VehicleOwner(chain_id=person.chain_id, public_key=person.public_key)

    @property
    def owner_public_key(self) -> bytes | None:
        return self.owner.public_key if self.owner is not None else None
