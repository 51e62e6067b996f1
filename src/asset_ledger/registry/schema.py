"""Asset schemas describing the positional arguments accepted by ``create``."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from ..errors import ValidationError

__all__ = [
    "AssetSchema",
    "FieldSpec",
    "MARBLE_SCHEMA",
    "SCHEMAS",
    "Scalar",
    "VALUE_SCHEMA",
    "get_schema",
    "parse_integer",
]

Scalar = str | int
"""Type alias for values stored in asset record fields."""

FieldKind = Literal["text", "integer"]

_ORDINALS = ("1st", "2nd", "3rd")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_integer(raw: str) -> int | None:
    """Return *raw* as an ``int``, or ``None`` unless it is a plain signed decimal.

    Surrounding whitespace, digit separators and non-ASCII digits are rejected.
    """

    if _INTEGER_PATTERN.fullmatch(raw) is None:
        return None
    return int(raw)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Describe a single positional field of an asset record."""

    name: str
    kind: FieldKind = "text"
    lowercase: bool = True

    def coerce(self, raw: str, position: int) -> Scalar:
        """Return *raw* converted to the field's stored representation."""

        if self.kind == "integer":
            value = parse_integer(raw)
            if value is None:
                raise ValidationError(
                    f"{_ordinal(position)} argument must be a numeric string"
                )
            return value
        return raw.lower() if self.lowercase else raw


@dataclass(frozen=True, slots=True)
class AssetSchema:
    """Ordered field layout for one kind of asset.

    The first field is always ``name`` (the storage key) and the last is
    always ``user`` (the current owner). Everything in between is a domain
    attribute.
    """

    kind: str
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        names = [spec.name for spec in self.fields]
        if len(names) < 2 or names[0] != "name" or names[-1] != "user":
            raise ValueError("Asset schemas must start with 'name' and end with 'user'")
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate field names in schema {self.kind!r}")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def attributes(self) -> tuple[FieldSpec, ...]:
        """Return the domain attribute fields between ``name`` and ``user``."""

        return self.fields[1:-1]

    @property
    def arity(self) -> int:
        return len(self.fields)

    def parse_arguments(self, args: Sequence[str]) -> dict[str, Scalar]:
        """Validate positional *args* and return normalized field values.

        Raises
        ------
        ValidationError
            If the argument count does not match the schema, an argument is
            empty, or an integer field does not parse.
        """

        if len(args) != self.arity:
            raise ValidationError(
                f"Incorrect number of arguments. Expecting {self.arity}"
            )
        for position, raw in enumerate(args, start=1):
            if not raw:
                raise ValidationError(
                    f"{_ordinal(position)} argument must be a non-empty string"
                )

        values: dict[str, Scalar] = {}
        for position, (spec, raw) in enumerate(zip(self.fields, args), start=1):
            if spec.name == "name":
                values[spec.name] = raw
            else:
                values[spec.name] = spec.coerce(raw, position)
        return values


VALUE_SCHEMA = AssetSchema(
    kind="value",
    fields=(FieldSpec("name"), FieldSpec("value"), FieldSpec("user")),
)
"""Generic asset carrying a single free-form value."""

MARBLE_SCHEMA = AssetSchema(
    kind="marble",
    fields=(
        FieldSpec("name"),
        FieldSpec("color"),
        FieldSpec("size", kind="integer"),
        FieldSpec("user"),
    ),
)
"""Asset with a colour and an integer size."""

SCHEMAS: dict[str, AssetSchema] = {
    VALUE_SCHEMA.kind: VALUE_SCHEMA,
    MARBLE_SCHEMA.kind: MARBLE_SCHEMA,
}


def get_schema(kind: str | AssetSchema) -> AssetSchema:
    """Return the schema registered under *kind*."""

    if isinstance(kind, AssetSchema):
        return kind
    try:
        return SCHEMAS[kind.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(SCHEMAS))
        raise ValueError(f"Unknown asset schema {kind!r} (expected one of: {known})") from None


def _ordinal(position: int) -> str:
    if position <= len(_ORDINALS):
        return _ORDINALS[position - 1]
    return f"{position}th"
