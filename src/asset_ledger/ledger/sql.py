"""SQLAlchemy-backed implementation of the ledger capability."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .base import HistoryEntry, LedgerError, LedgerKeyError
from .models import HistoryRecord, StateEntry, create_session_factory, get_engine, metadata

__all__ = ["SQLLedgerStore"]


logger = logging.getLogger(__name__)


class SQLLedgerStore:
    """Persist ledger state and history through SQLAlchemy sessions.

    Each :meth:`get`, :meth:`put` and :meth:`delete` call runs in its own
    session and commits immediately, unless it is issued inside
    :meth:`transaction`, in which case all calls share one session that is
    committed (or rolled back) when the block exits.
    """

    def __init__(self, url: str | None = None, *, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine(url)
        metadata.create_all(self._engine)
        self._session_factory = create_session_factory(self._engine)
        self._active: Session | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def engine(self) -> Engine:
        """Return the engine bound to this store."""

        return self._engine

    # ------------------------------------------------------------------
    # LedgerStore API
    # ------------------------------------------------------------------
    def get(self, key: str) -> bytes:
        with self._session() as session:
            entry = session.get(StateEntry, key)
            if entry is None:
                raise LedgerKeyError(key)
            return bytes(entry.value)

    def put(self, key: str, value: bytes) -> None:
        if not isinstance(value, bytes | bytearray):
            raise LedgerError(f"Ledger values must be bytes, got {type(value)!r}")
        payload = bytes(value)
        with self._session() as session:
            entry = session.get(StateEntry, key)
            if entry is None:
                session.add(StateEntry(key=key, value=payload, version=1))
            else:
                entry.value = payload
                entry.version += 1
            session.add(HistoryRecord(key=key, value=payload))
        logger.debug("Stored %d bytes under %s", len(payload), key)

    def delete(self, key: str) -> None:
        with self._session() as session:
            entry = session.get(StateEntry, key)
            if entry is not None:
                session.delete(entry)
            session.add(HistoryRecord(key=key, value=None))
        logger.debug("Deleted ledger key %s", key)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run enclosed ledger calls in a single committed session."""

        if self._active is not None:
            # Nested blocks join the outer transaction.
            yield
            return

        session = self._session_factory()
        self._active = session
        try:
            yield
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise LedgerError(f"Ledger transaction failed: {exc}") from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            self._active = None
            session.close()

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------
    def keys(self) -> list[str]:
        """Return the committed keys in sorted order."""

        with self._session() as session:
            return list(session.scalars(select(StateEntry.key).order_by(StateEntry.key)))

    def version(self, key: str) -> int:
        """Return how many times *key* has been written since it was created."""

        with self._session() as session:
            entry = session.get(StateEntry, key)
            if entry is None:
                raise LedgerKeyError(key)
            return int(entry.version)

    def history(self, key: str | None = None) -> list[HistoryEntry]:
        """Return committed writes, optionally limited to *key*."""

        query = select(HistoryRecord).order_by(HistoryRecord.id)
        if key is not None:
            query = query.where(HistoryRecord.key == key)
        with self._session() as session:
            rows = session.scalars(query).all()
            return [
                HistoryEntry(
                    sequence=row.id,
                    key=row.key,
                    value=None if row.value is None else bytes(row.value),
                    recorded_at=_as_utc(row.created_at),
                )
                for row in rows
            ]

    def close(self) -> None:
        """Dispose of the pooled connections held by the engine."""

        self._engine.dispose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._active is not None:
            try:
                yield self._active
                self._active.flush()
            except SQLAlchemyError as exc:
                raise LedgerError(f"Ledger operation failed: {exc}") from exc
            return

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise LedgerError(f"Ledger operation failed: {exc}") from exc
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset on the way back out.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
