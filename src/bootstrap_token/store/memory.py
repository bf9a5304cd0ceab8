"""In-memory credential store, used for embedding and tests."""
from __future__ import annotations

import copy
import threading

from bootstrap_token.errors import AlreadyExistsError, NotFoundError
from bootstrap_token.store.base import StoredRecord, TokenStoreClient


class InMemoryTokenStore(TokenStoreClient):
    """Dictionary-backed store keyed by ``(namespace, name)``.

    Thread-safe. Records are copied on the way in and out so callers can
    never mutate stored state through a returned object.
    """

    def __init__(self, records: list[StoredRecord] | None = None) -> None:
        self._records: dict[tuple[str, str], StoredRecord] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self._records[(record.namespace, record.name)] = copy.deepcopy(record)

    # ------------------------------------------------------------------
    # TokenStoreClient interface
    # ------------------------------------------------------------------

    def create(self, namespace: str, record: StoredRecord) -> None:
        key = (namespace, record.name)
        with self._lock:
            if key in self._records:
                raise AlreadyExistsError(
                    f"record {record.name!r} already exists in namespace {namespace!r}",
                    action="create",
                )
            stored = copy.deepcopy(record)
            stored.namespace = namespace
            self._records[key] = stored

    def list(self, namespace: str, type_selector: str) -> list[StoredRecord]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for (ns, _), record in self._records.items()
                if ns == namespace and record.type == type_selector
            ]

    def delete(self, namespace: str, name: str) -> None:
        with self._lock:
            if (namespace, name) not in self._records:
                raise NotFoundError(
                    f"record {name!r} not found in namespace {namespace!r}",
                    action="delete",
                )
            del self._records[(namespace, name)]

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def get(self, namespace: str, name: str) -> StoredRecord:
        """Return a copy of a single record.

        Raises
        ------
        NotFoundError
            If the record does not exist.
        """
        with self._lock:
            try:
                return copy.deepcopy(self._records[(namespace, name)])
            except KeyError:
                raise NotFoundError(
                    f"record {name!r} not found in namespace {namespace!r}",
                    action="get",
                ) from None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        """Support ``("kube-system", "bootstrap-token-abcdef") in store``."""
        with self._lock:
            return key in self._records
