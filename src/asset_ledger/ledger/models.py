"""Database schema definitions for the SQL ledger backend.

Two tables back the ledger:

* :class:`StateEntry` – the current value for every live key together with a
  per-key version counter.
* :class:`HistoryRecord` – an append-only log of every committed write.
  Deletions are stored as rows with a ``NULL`` value.

Alongside the ORM mappings the module provides helpers for instantiating a
configured engine and constructing sessions so that tests and runtime code
share the same setup.
"""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    DateTime,
    Integer,
    LargeBinary,
    String,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)
from sqlalchemy.pool import StaticPool

from ..config import DEFAULT_DATABASE_URL

__all__ = [
    "Base",
    "HistoryRecord",
    "StateEntry",
    "create_session_factory",
    "get_engine",
    "metadata",
]


def _utcnow() -> datetime:
    """Return an aware UTC timestamp used by default for temporal columns."""

    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models within the ledger schema."""


metadata = Base.metadata
"""Exposed metadata object for table management."""


def _is_memory_url(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.endswith("://"))


def _configure_sqlite_pragma(engine: Engine) -> None:
    """Switch file-backed SQLite ledgers to write-ahead logging."""

    if engine.url.get_backend_name() != "sqlite" or _is_memory_url(str(engine.url)):
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
        finally:
            cursor.close()


def get_engine(url: str | None = None, **kwargs: Any) -> Engine:
    """Return a configured SQLAlchemy engine.

    Parameters
    ----------
    url:
        Optional database URL. When omitted a private in-memory SQLite
        database is used.
    **kwargs:
        Additional keyword arguments forwarded to :func:`sqlalchemy.create_engine`.
    """

    actual_url = url or DEFAULT_DATABASE_URL
    if _is_memory_url(actual_url):
        # Every connection must see the same in-memory database.
        kwargs.setdefault("poolclass", StaticPool)
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    engine = create_engine(actual_url, **kwargs)
    _configure_sqlite_pragma(engine)
    return engine


def create_session_factory(
    engine: Engine | None = None,
    *,
    expire_on_commit: bool = False,
    autoflush: bool = False,
) -> sessionmaker[Session]:
    """Return a ``sessionmaker`` bound to the supplied engine."""

    bound_engine = engine or get_engine()
    return sessionmaker(
        bind=bound_engine,
        expire_on_commit=expire_on_commit,
        autoflush=autoflush,
    )


class StateEntry(Base):
    """Current value stored under a ledger key."""

    __tablename__ = "ledger_state"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary(), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )


class HistoryRecord(Base):
    """Append-only log row describing one committed write."""

    __tablename__ = "ledger_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    key: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    value: Mapped[bytes | None] = mapped_column(LargeBinary(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
