"""Dry-run credential store.

Wraps a real store: reads are passed through, writes are described on an
output stream instead of being performed.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from bootstrap_token.store.base import StoredRecord, TokenStoreClient

logger = logging.getLogger(__name__)


class DryRunTokenStore(TokenStoreClient):
    """Store decorator that never mutates the wrapped backend.

    Parameters
    ----------
    backend:
        Store used to answer ``list`` calls. ``None`` answers with an
        empty list.
    out:
        Stream the would-be writes are reported on (default stdout).
    """

    def __init__(
        self,
        backend: TokenStoreClient | None = None,
        out: TextIO | None = None,
    ) -> None:
        self._backend = backend
        self._out = out or sys.stdout

    def create(self, namespace: str, record: StoredRecord) -> None:
        # Key names only: the data holds the token secret.
        keys = ", ".join(sorted(record.data))
        logger.debug("dry-run: skipping create of %s/%s", namespace, record.name)
        self._out.write(
            f"[dryrun] Would create secret {record.name!r} of type {record.type!r} "
            f"in namespace {namespace!r} with keys: {keys}\n"
        )

    def list(self, namespace: str, type_selector: str) -> list[StoredRecord]:
        if self._backend is None:
            return []
        return self._backend.list(namespace, type_selector)

    def delete(self, namespace: str, name: str) -> None:
        logger.debug("dry-run: skipping delete of %s/%s", namespace, name)
        self._out.write(f"[dryrun] Would delete secret {name!r} in namespace {namespace!r}\n")
