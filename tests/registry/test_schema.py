"""Tests for positional argument validation in asset schemas."""

from __future__ import annotations

import pytest

from asset_ledger.errors import ValidationError
from asset_ledger.registry import MARBLE_SCHEMA, VALUE_SCHEMA, AssetSchema, FieldSpec, get_schema
from asset_ledger.registry.schema import parse_integer


def test_value_schema_lowercases_text_fields() -> None:
    values = VALUE_SCHEMA.parse_arguments(["Lamp", "Brass", "Alice"])

    assert values == {"name": "Lamp", "value": "brass", "user": "alice"}


def test_marble_schema_parses_integer_size() -> None:
    values = MARBLE_SCHEMA.parse_arguments(["widget1", "RED", "5", "Alice"])

    assert values == {"name": "widget1", "color": "red", "size": 5, "user": "alice"}
    assert MARBLE_SCHEMA.arity == 4
    assert [spec.name for spec in MARBLE_SCHEMA.attributes] == ["color", "size"]


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["widget1", "red", "5"], "Expecting 4"),
        (["widget1", "red", "5", "alice", "extra"], "Expecting 4"),
        (["", "red", "5", "alice"], "1st argument"),
        (["widget1", "red", "", "alice"], "3rd argument"),
        (["widget1", "red", "5", ""], "4th argument"),
        (["widget1", "red", "five", "alice"], "numeric"),
    ],
)
def test_invalid_arguments_are_rejected(args: list[str], message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        MARBLE_SCHEMA.parse_arguments(args)


@pytest.mark.parametrize("raw", [" 5 ", "5 ", "1_000", "\u0665", "0x10", "5.0", "+"])
def test_integer_fields_reject_loose_spellings(raw: str) -> None:
    assert parse_integer(raw) is None
    with pytest.raises(ValidationError, match="numeric"):
        MARBLE_SCHEMA.parse_arguments(["widget1", "red", raw, "alice"])


@pytest.mark.parametrize(("raw", "expected"), [("5", 5), ("+5", 5), ("-3", -3), ("007", 7)])
def test_integer_fields_accept_signed_decimals(raw: str, expected: int) -> None:
    assert parse_integer(raw) == expected
    assert MARBLE_SCHEMA.parse_arguments(["widget1", "red", raw, "alice"])["size"] == expected


def test_get_schema_lookup() -> None:
    assert get_schema("value") is VALUE_SCHEMA
    assert get_schema(" Marble ") is MARBLE_SCHEMA
    assert get_schema(MARBLE_SCHEMA) is MARBLE_SCHEMA
    with pytest.raises(ValueError, match="Unknown asset schema"):
        get_schema("vehicle")


def test_schema_requires_name_and_user_bookends() -> None:
    with pytest.raises(ValueError):
        AssetSchema(kind="broken", fields=(FieldSpec("user"), FieldSpec("name")))
    with pytest.raises(ValueError, match="Duplicate"):
        AssetSchema(
            kind="broken",
            fields=(FieldSpec("name"), FieldSpec("color"), FieldSpec("color"), FieldSpec("user")),
        )
