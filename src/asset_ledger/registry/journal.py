"""Intent journal used to repair the index after an interrupted write."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

from ..errors import SerializationError

__all__ = ["JournalEntry"]

JournalOp = Literal["create", "delete"]

_OPS: frozenset[str] = frozenset({"create", "delete"})


@dataclass(frozen=True, slots=True)
class JournalEntry:
    """Describe a two-write operation that has started but not finished."""

    op: JournalOp
    name: str

    def to_bytes(self) -> bytes:
        return json.dumps({"op": self.op, "name": self.name}).encode("utf-8")

    @classmethod
    def from_bytes(cls, payload: bytes) -> JournalEntry:
        try:
            data = json.loads(payload)
        except (RecursionError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError(f"Journal entry is not valid JSON: {exc}") from exc
        if (
            not isinstance(data, dict)
            or data.get("op") not in _OPS
            or not isinstance(data.get("name"), str)
            or not data["name"]
        ):
            raise SerializationError("Journal entry must contain an 'op' and a 'name'")
        return cls(op=data["op"], name=data["name"])
