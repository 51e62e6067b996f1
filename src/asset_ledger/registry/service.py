"""Asset registry operations layered over a key-value ledger.

The registry owns three rules:

* which create/update/delete requests are valid,
* how an :class:`~asset_ledger.registry.records.AssetRecord` is serialized,
* how the :class:`~asset_ledger.registry.index.AssetIndex` is kept equal to
  the set of live asset names.

Operations accept positional string arguments, mirroring the way callers
submit them through the dispatcher. The ledger is the only source of truth;
nothing is cached between calls.

Creating and deleting an asset touches two keys (the record and the index).
When the ledger supports transactions both writes are committed together.
Otherwise an intent journal entry is written first and removed once both
writes succeed, so :meth:`AssetRegistry.recover` can repair the index after
an interruption.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from ..config import RegistryConfig, get_config
from ..errors import (
    AlreadyExistsError,
    DeletionError,
    NotFoundError,
    PersistenceError,
    SerializationError,
    ValidationError,
)
from ..ledger import LedgerError, LedgerKeyError, LedgerStore, SQLLedgerStore, supports_transactions
from .index import AssetIndex
from .journal import JournalEntry, JournalOp
from .records import AssetRecord, decode_record, encode_record, stored_name
from .schema import AssetSchema, get_schema, parse_integer

__all__ = ["AssetRegistry"]


logger = logging.getLogger(__name__)


class AssetRegistry:
    """Validate, serialize and index asset records stored on a ledger."""

    def __init__(
        self,
        store: LedgerStore | None = None,
        *,
        config: RegistryConfig | None = None,
        schema: str | AssetSchema | None = None,
    ) -> None:
        self._config = config or get_config()
        self._store = store if store is not None else SQLLedgerStore(self._config.database_url)
        self._schema = get_schema(schema if schema is not None else self._config.schema)
        self._transactional = supports_transactions(self._store)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def store(self) -> LedgerStore:
        """Return the ledger backing this registry."""

        return self._store

    @property
    def schema(self) -> AssetSchema:
        return self._schema

    @property
    def config(self) -> RegistryConfig:
        return self._config

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def initialize(self, *args: str) -> None:
        """Write the seed value and reset the index to empty."""

        if len(args) != 1:
            raise ValidationError("Incorrect number of arguments. Expecting 1")
        seed = parse_integer(args[0])
        if seed is None:
            raise ValidationError("Expecting integer value for asset holding")

        with self._transaction("initialize"):
            self._put(self._config.bootstrap_key, str(seed).encode("utf-8"))
            self._save_index(AssetIndex())
        logger.info("Initialized registry with seed value %d", seed)

    def read(self, *args: str) -> bytes:
        """Return the raw bytes stored under a key, without decoding them."""

        if len(args) != 1 or not args[0]:
            raise ValidationError(
                "Incorrect number of arguments. Expecting name of the var to query"
            )
        name = args[0]
        try:
            return self._store.get(name)
        except LedgerError as exc:
            raise NotFoundError(f"Failed to get state for {name}") from exc

    def write_raw(self, *args: str) -> None:
        """Overwrite a key with an arbitrary string, bypassing schema and index."""

        if len(args) != 2:
            raise ValidationError(
                "Incorrect number of arguments. Expecting 2. "
                "name of the variable and value to set"
            )
        name, value = args
        if not name:
            raise ValidationError("1st argument must be a non-empty string")
        self._put(name, value.encode("utf-8"))

    def create(self, *args: str) -> bytes:
        """Create a new asset record and add its name to the index.

        Returns the serialized record that was stored.
        """

        values = self._schema.parse_arguments(args)
        name = str(values["name"])
        self._require_asset_key(name)

        if self._exists(name):
            raise AlreadyExistsError("This asset already exists")

        record = AssetRecord.from_fields(values)
        payload = encode_record(record, self._schema)

        with self._journaled("create", name):
            self._put(name, payload)
            index = self._load_index()
            index.add(name)
            self._save_index(index)

        logger.debug("Created asset %s owned by %s", name, record.user)
        return payload

    def transfer(self, *args: str) -> bytes:
        """Change the ``user`` of an existing asset, leaving other fields alone.

        Returns the serialized record that was stored.
        """

        if len(args) < 2:
            raise ValidationError("Incorrect number of arguments. Expecting 2")
        name, user = args[0], args[1]
        if not name:
            raise ValidationError("1st argument must be a non-empty string")
        if not user:
            raise ValidationError("2nd argument must be a non-empty string")
        self._require_asset_key(name)

        record = self.get_record(name)
        updated = record.with_user(user)
        payload = encode_record(updated, self._schema)
        self._put(name, payload)

        logger.debug("Transferred asset %s from %s to %s", name, record.user, user)
        return payload

    update = transfer

    def delete(self, *args: str) -> None:
        """Delete an asset record and drop its name from the index."""

        if len(args) != 1:
            raise ValidationError("Incorrect number of arguments. Expecting 1")
        name = args[0]
        if not name:
            raise ValidationError("1st argument must be a non-empty string")
        self._require_asset_key(name)

        with self._journaled("delete", name):
            self._delete_key(name)
            index = self._load_index()
            if not index.discard(name):
                logger.debug("Asset %s was not present in the index", name)
            self._save_index(index)

        logger.debug("Deleted asset %s", name)

    def list_assets(self) -> list[str]:
        """Return the names of every live asset in sorted order."""

        return self._load_index().names()

    def get_record(self, name: str) -> AssetRecord:
        """Return the decoded record stored under *name*.

        Raises
        ------
        NotFoundError
            If the ledger holds no state for *name*.
        SerializationError
            If the stored bytes do not describe an asset named *name*.
        """

        payload = self.read(name)
        record = decode_record(payload, self._schema)
        if record.name != name:
            raise SerializationError(
                f"Record stored under {name!r} describes asset {record.name!r}"
            )
        return record

    def recover(self) -> str | None:
        """Reconcile the index after a create/delete left in the intent journal.

        Returns the name of the asset whose index entry was repaired, or
        ``None`` when there was nothing to do.
        """

        journal_key = self._config.journal_key
        try:
            payload = self._store.get(journal_key)
        except LedgerKeyError:
            return None
        except LedgerError as exc:
            raise NotFoundError("Failed to get intent journal") from exc

        entry = JournalEntry.from_bytes(payload)
        logger.warning("Found interrupted %s of asset %s", entry.op, entry.name)

        # The index entry follows the record actually on the ledger; the
        # interrupted write itself is never retried.
        with self._transaction("recover"):
            index = self._load_index()
            if self._exists(entry.name):
                index.add(entry.name)
            else:
                index.discard(entry.name)
            self._save_index(index)
            self._delete_key(journal_key)

        logger.info("Repaired index entry for asset %s", entry.name)
        return entry.name

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _require_asset_key(self, name: str) -> None:
        if name in self._config.reserved_keys:
            raise ValidationError(f"{name!r} is a reserved key and cannot name an asset")

    def _exists(self, name: str) -> bool:
        try:
            payload = self._store.get(name)
        except LedgerKeyError:
            return False
        except LedgerError as exc:
            raise NotFoundError("Failed to get asset name") from exc
        # Values that do not decode to an object carrying this name are
        # treated as free slots.
        return stored_name(payload) == name

    def _load_index(self) -> AssetIndex:
        try:
            payload = self._store.get(self._config.index_key)
        except LedgerKeyError:
            return AssetIndex()
        except LedgerError as exc:
            raise NotFoundError("Failed to get asset index") from exc
        return AssetIndex.from_bytes(payload)

    def _save_index(self, index: AssetIndex) -> None:
        self._put(self._config.index_key, index.to_bytes())
        logger.debug("Index now holds %d assets", len(index))

    def _put(self, key: str, value: bytes) -> None:
        try:
            self._store.put(key, value)
        except LedgerError as exc:
            raise PersistenceError(f"Failed to put state for {key}") from exc

    def _delete_key(self, key: str) -> None:
        try:
            self._store.delete(key)
        except LedgerError as exc:
            raise DeletionError("Failed to delete state") from exc

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        if not self._transactional:
            yield
            return
        try:
            with self._store.transaction():  # type: ignore[attr-defined]
                yield
        except LedgerError as exc:
            raise PersistenceError(f"Failed to commit {action}") from exc

    @contextmanager
    def _journaled(self, op: JournalOp, name: str) -> Iterator[None]:
        if self._transactional:
            with self._transaction(op):
                yield
            return

        # Settle any earlier interrupted write before its entry is replaced.
        self.recover()
        self._put(self._config.journal_key, JournalEntry(op=op, name=name).to_bytes())
        yield
        self._delete_key(self._config.journal_key)
