"""Credential store contract and bundled backends.

``TokenStoreClient`` is the interface the token service talks to. The
bundled backends cover embedding (``InMemoryTokenStore``), the command
line (``FileTokenStore``) and dry runs (``DryRunTokenStore``).
"""
from __future__ import annotations

from bootstrap_token.store.base import StoredRecord, TokenStoreClient
from bootstrap_token.store.dry_run import DryRunTokenStore
from bootstrap_token.store.filesystem import FileTokenStore
from bootstrap_token.store.memory import InMemoryTokenStore

__all__ = [
    "DryRunTokenStore",
    "FileTokenStore",
    "InMemoryTokenStore",
    "StoredRecord",
    "TokenStoreClient",
]
