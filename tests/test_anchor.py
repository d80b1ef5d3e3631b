"""Tests for fingerprint anchoring."""

from pathlib import Path

import pytest

from blackbox.anchor import AnchorWriter, build_anchor_entry
from blackbox.entities import Vehicle
from blackbox.errors import LedgerError, RevealError
from blackbox.fingerprint import fingerprint
from blackbox.ledger.memory import InMemoryLedger
from blackbox.receipts import load_receipts
from blackbox.registrar import Registrar
from blackbox.signing import verify_signature


@pytest.fixture
def chain_id(ledger: InMemoryLedger, owner) -> str:
    vehicle = Vehicle("1HGCM82633A004352")
    Registrar(ledger, owner).register(vehicle)
    return vehicle.chain_id


def test_anchor_appends_signed_record(ledger: InMemoryLedger, owner, chain_id: str):
    digest = fingerprint(b"segment")
    tx_id = AnchorWriter(ledger).anchor(chain_id, digest, owner)

    assert tx_id
    history = ledger.get_all_chain_entries(chain_id)
    assert len(history) == 2
    record = history[-1]
    signature, public_key = record.ext_ids
    assert record.content == digest
    assert public_key == owner.public_key
    assert verify_signature(owner.public_key, digest, signature)


def test_build_anchor_entry_is_deterministic(owner, chain_id: str):
    digest = fingerprint(b"x")
    assert build_anchor_entry(chain_id, digest, owner) == build_anchor_entry(
        chain_id, digest, owner
    )


def test_separate_payer_is_charged(ledger: InMemoryLedger, owner, stranger, chain_id):
    spent_before = ledger.credits_spent(owner)
    AnchorWriter(ledger).anchor(chain_id, fingerprint(b"x"), owner, payer=stranger)

    assert ledger.credits_spent(stranger) == 1
    assert ledger.credits_spent(owner) == spent_before
    assert ledger.get_all_chain_entries(chain_id)[-1].ext_ids[1] == owner.public_key


def test_anchor_to_missing_chain_raises_reveal_error(ledger: InMemoryLedger, owner):
    with pytest.raises(RevealError) as excinfo:
        AnchorWriter(ledger).anchor("cd" * 32, fingerprint(b"x"), owner)
    assert isinstance(excinfo.value, LedgerError)
    assert excinfo.value.entry_hash


def test_anchor_file_writes_receipt(
    ledger: InMemoryLedger, owner, chain_id: str, tmp_path: Path
):
    blob = tmp_path / "20240101120000.txt"
    blob.write_text("Vehicle Speed: 42 km/h\n", encoding="utf-8")
    journal = tmp_path / "receipts.ndjson"

    receipt = AnchorWriter(ledger).anchor_file(chain_id, blob, owner, journal=journal)

    assert receipt.fingerprint == fingerprint(blob.read_bytes()).hex()
    assert receipt.source_path == str(blob)
    assert ledger.get_entry(receipt.entry_hash).content.hex() == receipt.fingerprint
    assert load_receipts(journal) == [receipt]


def test_anchor_file_missing_blob_submits_nothing(
    ledger: InMemoryLedger, owner, chain_id: str, tmp_path: Path
):
    with pytest.raises(OSError):
        AnchorWriter(ledger).anchor_file(chain_id, tmp_path / "missing", owner)
    assert len(ledger.get_all_chain_entries(chain_id)) == 1
