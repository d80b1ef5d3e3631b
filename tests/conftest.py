"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import inspect
import os
import sys
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from blackbox.ledger.memory import InMemoryLedger  # noqa: E402
from blackbox.signing import KeyPair  # noqa: E402

OWNER_SEED = bytes.fromhex(
    "9f2c4b7a1d08e3f5a6b0c3d4e7f812349abcedf00123456789abcdef01234567"
)
OTHER_SEED = bytes(range(32))


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring an event loop")


def pytest_pyfunc_call(pyfuncitem: Any) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # type: ignore[attr-defined]
        }

        event_loop = asyncio.new_event_loop()
        try:
            event_loop.run_until_complete(pyfuncitem.obj(**call_kwargs))
        finally:
            event_loop.close()
        return True
    return None


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def owner() -> KeyPair:
    """Deterministic (but non-trivial) owner key for reproducible tests."""

    return KeyPair(OWNER_SEED)


@pytest.fixture
def stranger() -> KeyPair:
    return KeyPair(OTHER_SEED)
