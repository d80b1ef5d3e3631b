"""Command-line utilities for blackbox."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .anchor import AnchorWriter
from .entities import Person, Vehicle
from .errors import BlackboxError
from .fingerprint import fingerprint_file
from .identity import PERSON_NAMESPACE, derive_chain_id
from .integrity import IntegrityVerifier
from .ledger.base import LedgerClient
from .ledger.factomd import FactomdClient
from .registrar import Registrar
from .settings import BlackboxSettings, get_settings
from .signing import PUBLIC_KEY_SIZE, KeyPair


def _emit(payload: dict[str, object]) -> None:
    print(json.dumps(payload, separators=(",", ":")))


def _parse_public_key(value: str) -> bytes:
    """Decode a hex public key, allowing an optional ``0x`` prefix."""

    text = value.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    try:
        key = bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError("Public key must be hex encoded") from exc
    if len(key) != PUBLIC_KEY_SIZE:
        raise ValueError(f"Public key must be {PUBLIC_KEY_SIZE} bytes")
    return key


def _load_keypair(settings: BlackboxSettings) -> KeyPair:
    if not settings.secret_key:
        raise ValueError("BLACKBOX_SECRET_KEY is not set.")
    return KeyPair.from_hex(settings.secret_key)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``blackbox`` command."""

    parser = argparse.ArgumentParser(
        prog="blackbox",
        description="Anchor and verify fingerprints of vehicle data on a ledger.",
    )
    parser.add_argument(
        "--factomd-url",
        help="Ledger JSON-RPC endpoint. Defaults to BLACKBOX_FACTOMD_URL.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request ledger timeout in seconds.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    chain_id = commands.add_parser("chain-id", help="Derive an identity chain ID.")
    target = chain_id.add_mutually_exclusive_group(required=True)
    target.add_argument("--vin", help="17 character vehicle identification number.")
    target.add_argument("--public-key", help="Driver public key (hex).")

    fingerprint = commands.add_parser("fingerprint", help="Fingerprint a file.")
    fingerprint.add_argument("file")

    verify = commands.add_parser(
        "verify", help="Scan a chain for an anchor matching a file."
    )
    verify.add_argument("--chain-id", required=True)
    verify.add_argument("--file", required=True)
    verify.add_argument("--public-key", required=True, help="Owner public key (hex).")

    check = commands.add_parser(
        "check-record", help="Check a file against one known record."
    )
    check.add_argument("--record", required=True, help="Entry hash of the record.")
    check.add_argument("--file", required=True)
    check.add_argument("--public-key", required=True, help="Owner public key (hex).")

    register = commands.add_parser(
        "register-vehicle", help="Create a vehicle identity chain if missing."
    )
    register.add_argument("--vin", required=True)

    commands.add_parser(
        "register-driver", help="Create the driver identity chain for the configured key."
    )

    anchor = commands.add_parser("anchor", help="Anchor a file's fingerprint.")
    anchor.add_argument("--chain-id", required=True)
    anchor.add_argument("--file", required=True)
    anchor.add_argument(
        "--journal",
        help="Receipt journal path. Defaults to BLACKBOX_RECEIPT_JOURNAL.",
    )
    return parser


def _client(args: argparse.Namespace, settings: BlackboxSettings) -> LedgerClient:
    return FactomdClient(
        args.factomd_url, timeout_seconds=args.timeout, settings=settings
    )


def _run(args: argparse.Namespace, settings: BlackboxSettings) -> int:
    if args.command == "chain-id":
        if args.vin is not None:
            _emit({"chain_id": Vehicle(args.vin).chain_id})
        else:
            key = _parse_public_key(args.public_key)
            _emit({"chain_id": derive_chain_id([PERSON_NAMESPACE, key])})
        return 0

    if args.command == "fingerprint":
        _emit({"file": args.file, "fingerprint": fingerprint_file(args.file).hex()})
        return 0

    if args.command == "verify":
        owner = _parse_public_key(args.public_key)
        verifier = IntegrityVerifier(_client(args, settings))
        match = verifier.find_match(args.chain_id, args.file, owner)
        _emit(
            {
                "valid": match is not None,
                "entry_hash": match.entry_hash if match is not None else None,
            }
        )
        return 0 if match is not None else 1

    if args.command == "check-record":
        owner = _parse_public_key(args.public_key)
        verifier = IntegrityVerifier(_client(args, settings))
        valid = verifier.check_record(args.file, args.record, owner)
        _emit({"valid": valid})
        return 0 if valid else 1

    if args.command in ("register-vehicle", "register-driver"):
        keypair = _load_keypair(settings)
        entity = Vehicle(args.vin) if args.command == "register-vehicle" else Person(keypair)
        tx_id = Registrar(_client(args, settings), keypair).register(entity)
        _emit(
            {
                "chain_id": entity.chain_id,
                "tx_id": tx_id or None,
                "already_registered": not tx_id,
            }
        )
        return 0

    if args.command == "anchor":
        keypair = _load_keypair(settings)
        journal = args.journal or settings.receipt_journal
        receipt = AnchorWriter(_client(args, settings)).anchor_file(
            args.chain_id,
            Path(args.file),
            keypair,
            journal=journal,
        )
        _emit(receipt.model_dump(mode="json"))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``blackbox`` command."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    try:
        return _run(args, get_settings())
    except (BlackboxError, ValueError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
