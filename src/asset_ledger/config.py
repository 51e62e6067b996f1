"""Configuration helpers for the asset ledger registry."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

__all__ = [
    "DATABASE_URL_ENV_VAR",
    "DEFAULT_BOOTSTRAP_KEY",
    "DEFAULT_DATABASE_URL",
    "DEFAULT_INDEX_KEY",
    "DEFAULT_JOURNAL_KEY",
    "DEFAULT_SCHEMA",
    "RegistryConfig",
    "SCHEMA_ENV_VAR",
    "configure",
    "get_config",
]

DATABASE_URL_ENV_VAR: Final[str] = "ASSET_LEDGER_DATABASE_URL"
"""Environment variable that overrides the ledger database location."""

SCHEMA_ENV_VAR: Final[str] = "ASSET_LEDGER_SCHEMA"
"""Environment variable selecting the active asset schema."""

DEFAULT_DATABASE_URL: Final[str] = "sqlite+pysqlite:///:memory:"
"""Default ledger connection string (volatile in-memory SQLite)."""

DEFAULT_SCHEMA: Final[str] = "value"
"""Name of the asset schema used when nothing else is configured."""

DEFAULT_BOOTSTRAP_KEY: Final[str] = "abc"
"""Key receiving the seed value written by ``initialize``."""

DEFAULT_INDEX_KEY: Final[str] = "_assetindex"
"""Key holding the serialized asset index."""

DEFAULT_JOURNAL_KEY: Final[str] = "_assetjournal"
"""Key holding an in-flight intent journal entry."""


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Runtime configuration for the asset registry."""

    database_url: str = DEFAULT_DATABASE_URL
    schema: str = DEFAULT_SCHEMA
    bootstrap_key: str = DEFAULT_BOOTSTRAP_KEY
    index_key: str = DEFAULT_INDEX_KEY
    journal_key: str = DEFAULT_JOURNAL_KEY

    def __post_init__(self) -> None:
        for field_name in ("database_url", "schema"):
            value = _require_text(getattr(self, field_name), field_name)
            object.__setattr__(self, field_name, value)

        keys = self.reserved_keys
        for key in keys:
            if not key:
                raise ValueError("Reserved keys cannot be empty")
        if len(set(keys)) != len(keys):
            raise ValueError("Reserved keys must be distinct")

    @property
    def reserved_keys(self) -> tuple[str, str, str]:
        """Return every key used for registry bookkeeping."""

        return (self.bootstrap_key, self.index_key, self.journal_key)


_CONFIG: RegistryConfig | None = None


def get_config() -> RegistryConfig:
    """Return the cached :class:`RegistryConfig` instance."""

    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _build_config()
    return _CONFIG


def configure(
    *,
    database_url: str | None = None,
    schema: str | None = None,
) -> RegistryConfig:
    """Rebuild the global configuration with optional overrides."""

    global _CONFIG
    _CONFIG = _build_config(database_url=database_url, schema=schema)
    return _CONFIG


def _build_config(
    *,
    database_url: str | None = None,
    schema: str | None = None,
) -> RegistryConfig:
    if database_url is None:
        database_url = os.environ.get(DATABASE_URL_ENV_VAR) or DEFAULT_DATABASE_URL
    if schema is None:
        schema = os.environ.get(SCHEMA_ENV_VAR) or DEFAULT_SCHEMA
    return RegistryConfig(database_url=database_url, schema=schema)


def _require_text(value: str, field_name: str) -> str:
    text = str(value).strip()
    if not text:
        raise ValueError(f"Configuration value {field_name!r} cannot be empty")
    return text
