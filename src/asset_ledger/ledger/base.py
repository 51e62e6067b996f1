"""Capability protocols and shared types for ledger backends."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

__all__ = [
    "HistoryEntry",
    "LedgerError",
    "LedgerKeyError",
    "LedgerStore",
    "TransactionalLedgerStore",
    "supports_transactions",
]


class LedgerError(RuntimeError):
    """Raised when a ledger backend fails to service a request."""


class LedgerKeyError(LedgerError, KeyError):
    """Raised by :meth:`LedgerStore.get` when *key* holds no state."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No state stored for key {self.key!r}"


@runtime_checkable
class LedgerStore(Protocol):
    """Key-value state API consumed by the asset registry."""

    def get(self, key: str) -> bytes:
        """Return the bytes stored under *key*."""

    def put(self, key: str, value: bytes) -> None:
        """Store *value* under *key*, replacing any previous state."""

    def delete(self, key: str) -> None:
        """Remove *key*; deleting an absent key is not an error."""


@runtime_checkable
class TransactionalLedgerStore(LedgerStore, Protocol):
    """Ledger able to commit several writes as a single unit."""

    def transaction(self) -> AbstractContextManager[None]:
        """Return a context manager committing enclosed writes atomically."""


def supports_transactions(store: LedgerStore) -> bool:
    """Return ``True`` when *store* offers multi-key transactions."""

    return isinstance(store, TransactionalLedgerStore)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Append-only record of a single committed ledger write.

    ``value`` is ``None`` for deletions (tombstones).
    """

    sequence: int
    key: str
    value: bytes | None
    recorded_at: datetime

    @property
    def is_tombstone(self) -> bool:
        return self.value is None
