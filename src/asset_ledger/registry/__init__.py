"""Asset record lifecycle and index maintenance."""

from .index import AssetIndex
from .journal import JournalEntry
from .records import AssetRecord, decode_record, encode_record
from .schema import (
    MARBLE_SCHEMA,
    SCHEMAS,
    VALUE_SCHEMA,
    AssetSchema,
    FieldSpec,
    get_schema,
)
from .service import AssetRegistry

__all__ = [
    "AssetIndex",
    "AssetRecord",
    "AssetRegistry",
    "AssetSchema",
    "FieldSpec",
    "JournalEntry",
    "MARBLE_SCHEMA",
    "SCHEMAS",
    "VALUE_SCHEMA",
    "decode_record",
    "encode_record",
    "get_schema",
]
