"""Pytest configuration helpers for asset_ledger tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the source directory is importable without requiring an editable install.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture(autouse=True)
def reset_registry_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure each test runs with the default registry configuration."""

    from asset_ledger.config import DATABASE_URL_ENV_VAR, SCHEMA_ENV_VAR, configure

    monkeypatch.delenv(DATABASE_URL_ENV_VAR, raising=False)
    monkeypatch.delenv(SCHEMA_ENV_VAR, raising=False)
    configure()
    yield
    configure()


@pytest.fixture()
def memory_ledger():
    """Return an empty in-memory ledger."""

    from asset_ledger.ledger import InMemoryLedger

    return InMemoryLedger()


@pytest.fixture()
def sql_ledger(tmp_path: Path):
    """Yield a file-backed SQL ledger that is disposed after the test."""

    from asset_ledger.ledger import SQLLedgerStore

    store = SQLLedgerStore(f"sqlite+pysqlite:///{tmp_path / 'ledger.sqlite'}")
    try:
        yield store
    finally:
        store.close()
