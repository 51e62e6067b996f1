"""Exception hierarchy raised by registry operations."""

from __future__ import annotations

import json

__all__ = [
    "AlreadyExistsError",
    "DeletionError",
    "NotFoundError",
    "PersistenceError",
    "RegistryError",
    "SerializationError",
    "UnknownOperationError",
    "ValidationError",
]


class RegistryError(RuntimeError):
    """Base class for every error surfaced by a registry operation."""

    def payload(self) -> bytes:
        """Return the structured ``{"Error": ...}`` payload for callers."""

        return json.dumps({"Error": str(self)}).encode("utf-8")


class ValidationError(RegistryError):
    """Raised when operation arguments are missing, empty or malformed."""


class UnknownOperationError(ValidationError):
    """Raised when the dispatcher receives an unrecognised function name."""


class AlreadyExistsError(RegistryError):
    """Raised when creating an asset whose record already exists."""


class NotFoundError(RegistryError):
    """Raised when the ledger cannot return the requested state."""


class DeletionError(RegistryError):
    """Raised when the ledger refuses to delete a key."""


class SerializationError(RegistryError):
    """Raised when stored bytes cannot be decoded into the expected shape."""


class PersistenceError(RegistryError):
    """Raised when the ledger rejects a write."""
