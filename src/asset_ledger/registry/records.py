"""In-memory asset records and their JSON wire format."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from ..errors import SerializationError
from .schema import AssetSchema, Scalar

__all__ = ["AssetRecord", "decode_record", "encode_record", "stored_name"]


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """In-memory representation of an asset persisted on the ledger."""

    name: str
    user: str
    attributes: Mapping[str, Scalar] = field(default_factory=dict)
    extras: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, values: Mapping[str, Scalar]) -> AssetRecord:
        """Build a record from a ``{field: value}`` mapping in schema order."""

        attributes = {
            key: value for key, value in values.items() if key not in ("name", "user")
        }
        return cls(name=str(values["name"]), user=str(values["user"]), attributes=attributes)

    def with_user(self, user: str) -> AssetRecord:
        """Return a copy owned by *user* with every other field unchanged."""

        return replace(self, user=user)

    def as_dict(self, schema: AssetSchema | None = None) -> dict[str, Any]:
        """Return the record as an ordered mapping.

        Keys come out as ``name``, the attributes, ``user`` and finally any
        extra keys the stored object carried.
        """

        if schema is None:
            ordered = dict(self.attributes)
        else:
            ordered = {
                spec.name: self.attributes[spec.name]
                for spec in schema.attributes
                if spec.name in self.attributes
            }
        return {"name": self.name, **ordered, "user": self.user, **self.extras}


def encode_record(record: AssetRecord, schema: AssetSchema | None = None) -> bytes:
    """Serialize *record* into the JSON bytes stored on the ledger."""

    return json.dumps(record.as_dict(schema), ensure_ascii=False).encode("utf-8")


def decode_record(payload: bytes | str | None, schema: AssetSchema) -> AssetRecord:
    """Parse ledger bytes into an :class:`AssetRecord` for *schema*.

    Raises
    ------
    SerializationError
        If *payload* is empty, is not a JSON object, or lacks a field required
        by *schema* with the expected type.
    """

    data = _load_object(payload)

    values: dict[str, Scalar] = {}
    for spec in schema.fields:
        if spec.name not in data:
            raise SerializationError(f"Stored asset is missing the {spec.name!r} field")
        value = data[spec.name]
        if spec.kind == "integer":
            if isinstance(value, bool) or not isinstance(value, int):
                raise SerializationError(f"Stored asset field {spec.name!r} must be an integer")
        elif not isinstance(value, str):
            raise SerializationError(f"Stored asset field {spec.name!r} must be a string")
        values[spec.name] = value

    record = AssetRecord.from_fields(values)
    extras = {key: value for key, value in data.items() if key not in values}
    return replace(record, extras=extras)


def stored_name(payload: bytes | str | None) -> str | None:
    """Return the ``name`` field of a stored object, or ``None`` if unreadable.

    Only the name is inspected so that a record written with a different
    schema still counts as occupying its key.
    """

    try:
        data = _load_object(payload)
    except SerializationError:
        return None
    name = data.get("name")
    return name if isinstance(name, str) else None


def _load_object(payload: bytes | str | None) -> dict[str, Any]:
    if not payload:
        raise SerializationError("Stored asset is empty")
    try:
        data = json.loads(payload)
    except (RecursionError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SerializationError(f"Stored asset is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SerializationError("Stored asset must be a JSON object")
    return data
