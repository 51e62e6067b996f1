"""Ledger backends implementing the key-value state capability."""

from .base import (
    HistoryEntry,
    LedgerError,
    LedgerKeyError,
    LedgerStore,
    TransactionalLedgerStore,
    supports_transactions,
)
from .memory import InMemoryLedger
from .sql import SQLLedgerStore

__all__ = [
    "HistoryEntry",
    "InMemoryLedger",
    "LedgerError",
    "LedgerKeyError",
    "LedgerStore",
    "SQLLedgerStore",
    "TransactionalLedgerStore",
    "supports_transactions",
]
