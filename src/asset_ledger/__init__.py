"""Top-level package for the asset ledger registry.

The package exposes an asset registry that keeps individually keyed asset
records and a secondary name index consistent on top of a key-value ledger.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
