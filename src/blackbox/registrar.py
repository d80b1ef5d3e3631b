"""Idempotent chain registration for drivers and vehicles."""

from __future__ import annotations

import logging

from .entities import Entity
from .ledger.base import LedgerClient
from .models import Chain
from .signing import KeyPair
from .submission import submit_chain

__all__ = ["Registrar"]

LOGGER = logging.getLogger(__name__)


class Registrar:
    """Create identity chains, at most once per entity.

    Args:
        client: Ledger the chains are created on.
        payer: Key pair that pays for chain creation.
    """

    def __init__(self, client: LedgerClient, payer: KeyPair) -> None:
        self._client = client
        self._payer = payer

    def is_registered(self, entity: Entity) -> bool:
        return self._client.chain_exists(entity.chain_id)

    def register(self, entity: Entity) -> str:
        """Create the entity's chain unless it already exists.

        Safe to call on every start: when the chain is already on the ledger
        nothing is submitted and an empty string is returned.

        Args:
            entity: Person or vehicle to register.

        Returns:
            The commit transaction ID, or ``""`` when already registered.

        Raises:
            LedgerError: From the existence check or the commit, unchanged.
            RevealError: When the commit succeeded but the reveal failed.
        """

        chain = Chain.from_name(entity.chain_name())
        if self._client.chain_exists(chain.chain_id):
            LOGGER.info(
                "Chain already registered",
                extra={"chain_id": chain.chain_id, "entity": type(entity).__name__},
            )
            return ""

        tx_id = submit_chain(self._client, chain, self._payer)
        LOGGER.info(
            "Chain registered",
            extra={
                "chain_id": chain.chain_id,
                "entity": type(entity).__name__,
                "tx_id": tx_id,
            },
        )
        return tx_id
