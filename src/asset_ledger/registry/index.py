"""Set-valued index enumerating every live asset name."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator

from ..errors import SerializationError

__all__ = ["AssetIndex"]


class AssetIndex:
    """Track the names of live asset records.

    Membership checks and removals are constant time. On the ledger the index
    is stored as a JSON array sorted by name so the persisted form is stable
    regardless of the order in which assets were created.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[str] = set(names)

    @classmethod
    def from_bytes(cls, payload: bytes | str | None) -> AssetIndex:
        """Decode a persisted index; ``None`` or empty bytes yield an empty index."""

        if not payload:
            return cls()
        try:
            data = json.loads(payload)
        except (RecursionError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SerializationError(f"Asset index is not valid JSON: {exc}") from exc
        if data is None:
            return cls()
        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            raise SerializationError("Asset index must be a JSON array of names")
        return cls(data)

    def to_bytes(self) -> bytes:
        return json.dumps(self.names(), ensure_ascii=False).encode("utf-8")

    def add(self, name: str) -> bool:
        """Add *name*, returning ``False`` when it was already present."""

        if name in self._names:
            return False
        self._names.add(name)
        return True

    def discard(self, name: str) -> bool:
        """Remove *name* if present, returning whether anything changed."""

        if name not in self._names:
            return False
        self._names.remove(name)
        return True

    def names(self) -> list[str]:
        """Return the indexed names in sorted order."""

        return sorted(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AssetIndex):
            return self._names == other._names
        return NotImplemented

    def __repr__(self) -> str:
        return f"AssetIndex({self.names()!r})"
