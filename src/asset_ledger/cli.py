"""Command line front end for the asset registry."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from .config import DATABASE_URL_ENV_VAR, SCHEMA_ENV_VAR, configure
from .dispatch import Dispatcher
from .errors import RegistryError
from .ledger import SQLLedgerStore
from .registry import SCHEMAS, AssetRegistry

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asset-ledger",
        description=(
            "Run a registry operation against the asset ledger. Mutating "
            "functions go through 'invoke', read-only ones through 'query'."
        ),
    )
    parser.add_argument(
        "--database",
        default=None,
        help=(
            "SQLAlchemy URL of the ledger database. Defaults to "
            f"${DATABASE_URL_ENV_VAR} or an in-memory SQLite database."
        ),
    )
    parser.add_argument(
        "--schema",
        choices=sorted(SCHEMAS),
        default=None,
        help=f"Asset schema used by 'create'. Defaults to ${SCHEMA_ENV_VAR} or 'value'.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log ledger writes and index changes.",
    )
    parser.add_argument("mode", choices=("invoke", "query"))
    parser.add_argument("function", help="Operation name, e.g. create or read.")
    parser.add_argument("args", nargs="*", help="Positional string arguments.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = configure(database_url=args.database, schema=args.schema)
    store = SQLLedgerStore(config.database_url)
    try:
        registry = AssetRegistry(store, config=config)
        registry.recover()
        dispatcher = Dispatcher(registry)
        if args.mode == "invoke":
            result = dispatcher.invoke(args.function, args.args)
        else:
            result = dispatcher.query(args.function, args.args)
    except RegistryError as exc:
        sys.stderr.write(exc.payload().decode("utf-8") + "\n")
        return 1
    finally:
        store.close()

    if result is not None:
        sys.stdout.write(result.decode("utf-8", errors="replace") + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
