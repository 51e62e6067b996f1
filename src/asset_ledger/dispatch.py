"""Route operation names and positional arguments to registry operations."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from typing import Literal

from .errors import RegistryError, UnknownOperationError, ValidationError
from .registry import AssetRegistry

__all__ = ["Dispatcher", "Handler", "Mode"]

logger = logging.getLogger(__name__)

Handler = Callable[..., bytes | None]
"""Callable receiving positional string arguments."""

Mode = Literal["invoke", "query"]


class Dispatcher:
    """Map function names onto :class:`AssetRegistry` operations.

    Mutating functions are reachable only through :meth:`invoke` and
    read-only functions only through :meth:`query`.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry
        self._handlers: dict[Mode, dict[str, Handler]] = {"invoke": {}, "query": {}}

        self.register("init", registry.initialize)
        self.register("write", registry.write_raw)
        self.register("create", registry.create)
        self.register("transfer", registry.transfer)
        self.register("set_user", registry.transfer)
        self.register("delete", registry.delete)
        self.register("read", registry.read, mode="query")
        self.register("list", self._list_assets, mode="query")

    @property
    def registry(self) -> AssetRegistry:
        return self._registry

    def register(self, function: str, handler: Handler, *, mode: Mode = "invoke") -> None:
        """Expose *handler* under *function* for the given *mode*."""

        if mode not in self._handlers:
            raise ValueError(f"Unknown dispatch mode {mode!r}")
        self._handlers[mode][function] = handler
        logger.debug("Registered %s handler %s", mode, function)

    def functions(self, mode: Mode) -> tuple[str, ...]:
        """Return the function names available in *mode*."""

        return tuple(sorted(self._handlers[mode]))

    def invoke(self, function: str, args: Sequence[str] = ()) -> bytes | None:
        """Run a mutating function."""

        return self._dispatch("invoke", function, args)

    def query(self, function: str, args: Sequence[str] = ()) -> bytes | None:
        """Run a read-only function."""

        return self._dispatch("query", function, args)

    def _dispatch(self, mode: Mode, function: str, args: Sequence[str]) -> bytes | None:
        handler = self._handlers[mode].get(function)
        if handler is None:
            raise UnknownOperationError(f"Received unknown function {_mode_noun(mode)}")
        try:
            return handler(*args)
        except RegistryError as exc:
            logger.debug("%s %s failed: %s", mode, function, exc)
            raise

    def _list_assets(self, *args: str) -> bytes:
        if args:
            raise ValidationError("Incorrect number of arguments. Expecting 0")
        return json.dumps(self._registry.list_assets()).encode("utf-8")


def _mode_noun(mode: Mode) -> str:
    return "invocation" if mode == "invoke" else "query"
