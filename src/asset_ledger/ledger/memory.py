"""Dictionary-backed ledger used for tests and embedded usage."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from .base import HistoryEntry, LedgerError, LedgerKeyError

__all__ = ["InMemoryLedger"]


logger = logging.getLogger(__name__)

_TOMBSTONE = None


class InMemoryLedger:
    """Keep ledger state in a ``dict`` alongside an append-only history.

    Writes issued inside :meth:`transaction` are staged and only applied to
    the committed state when the ``with`` block exits without an exception.
    Reads inside the block observe the staged writes.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._state: dict[str, bytes] = {}
        self._history: list[HistoryEntry] = []
        self._staged: dict[str, bytes | None] | None = None
        for key, value in (initial or {}).items():
            self._apply(key, bytes(value))

    # ------------------------------------------------------------------
    # LedgerStore API
    # ------------------------------------------------------------------
    def get(self, key: str) -> bytes:
        if self._staged is not None and key in self._staged:
            staged = self._staged[key]
            if staged is _TOMBSTONE:
                raise LedgerKeyError(key)
            return staged
        try:
            return self._state[key]
        except KeyError:
            raise LedgerKeyError(key) from None

    def put(self, key: str, value: bytes) -> None:
        if not isinstance(value, bytes | bytearray):
            raise LedgerError(f"Ledger values must be bytes, got {type(value)!r}")
        if self._staged is not None:
            self._staged[key] = bytes(value)
            return
        self._apply(key, bytes(value))

    def delete(self, key: str) -> None:
        if self._staged is not None:
            self._staged[key] = _TOMBSTONE
            return
        self._apply(key, _TOMBSTONE)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Stage writes and commit them together on success."""

        if self._staged is not None:
            # Nested blocks join the outer transaction.
            yield
            return

        self._staged = {}
        try:
            yield
        except BaseException:
            logger.debug("Discarding %d staged ledger writes", len(self._staged))
            raise
        else:
            for key, value in self._staged.items():
                self._apply(key, value)
        finally:
            self._staged = None

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def keys(self) -> list[str]:
        """Return the committed keys in sorted order."""

        return sorted(self._state)

    def history(self, key: str | None = None) -> list[HistoryEntry]:
        """Return committed writes, optionally limited to *key*."""

        if key is None:
            return list(self._history)
        return [entry for entry in self._history if entry.key == key]

    def __contains__(self, key: object) -> bool:
        return key in self._state

    def __len__(self) -> int:
        return len(self._state)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _apply(self, key: str, value: bytes | None) -> None:
        if value is _TOMBSTONE:
            self._state.pop(key, None)
        else:
            self._state[key] = value
        self._history.append(
            HistoryEntry(
                sequence=len(self._history) + 1,
                key=key,
                value=value,
                recorded_at=datetime.now(UTC),
            )
        )
