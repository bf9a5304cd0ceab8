"""JSON-file credential store.

Records are kept in a single JSON document; byte values are base64
encoded, the same way secret data is serialised on the wire. Used by the
command line so that tokens survive between invocations.
"""
from __future__ import annotations

import base64
import json
import logging
import threading
from pathlib import Path

from bootstrap_token.errors import AlreadyExistsError, NotFoundError, StoreError
from bootstrap_token.store.base import StoredRecord, TokenStoreClient

logger = logging.getLogger(__name__)


class FileTokenStore(TokenStoreClient):
    """File-backed store.

    The file is read on every call and rewritten on every mutation, so
    several processes pointed at the same path see each other's changes.

    An entry that cannot be read back (bad base64, missing fields) is
    skipped by :meth:`list` with a warning, and kept on disk untouched by
    :meth:`create` and :meth:`delete`. Only a document that is not a JSON
    list raises :class:`StoreError`.

    Parameters
    ----------
    path:
        Location of the JSON document. Created on first write.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # TokenStoreClient interface
    # ------------------------------------------------------------------

    def create(self, namespace: str, record: StoredRecord) -> None:
        with self._lock:
            entries = self._load()
            if any(_matches(entry, namespace, record.name) for entry in entries):
                raise AlreadyExistsError(
                    f"record {record.name!r} already exists in namespace {namespace!r}",
                    action="create",
                )
            entries.append(
                _record_to_dict(
                    StoredRecord(
                        name=record.name,
                        namespace=namespace,
                        type=record.type,
                        data=dict(record.data),
                    )
                )
            )
            self._write(entries)

    def list(self, namespace: str, type_selector: str) -> list[StoredRecord]:
        with self._lock:
            entries = self._load()

        records: list[StoredRecord] = []
        for index, entry in enumerate(entries):
            try:
                record = _record_from_dict(entry)
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                logger.warning(
                    "skipping unreadable entry %d in token store %s: %s",
                    index,
                    self._path,
                    exc,
                )
                continue
            if record.namespace == namespace and record.type == type_selector:
                records.append(record)
        return records

    def delete(self, namespace: str, name: str) -> None:
        with self._lock:
            entries = self._load()
            remaining = [entry for entry in entries if not _matches(entry, namespace, name)]
            if len(remaining) == len(entries):
                raise NotFoundError(
                    f"record {name!r} not found in namespace {namespace!r}",
                    action="delete",
                )
            self._write(remaining)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> list[object]:
        if not self._path.exists():
            return []
        try:
            entries = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"could not read token store {str(self._path)!r}: {exc}") from exc
        if not isinstance(entries, list):
            raise StoreError(f"token store {str(self._path)!r} does not hold a JSON list")
        return entries

    def _write(self, entries: list[object]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"could not write token store {str(self._path)!r}: {exc}") from exc


def _matches(entry: object, namespace: str, name: str) -> bool:
    return (
        isinstance(entry, dict)
        and entry.get("namespace") == namespace
        and entry.get("name") == name
    )


def _record_to_dict(record: StoredRecord) -> dict[str, object]:
    return {
        "name": record.name,
        "namespace": record.namespace,
        "type": record.type,
        "data": {
            key: base64.b64encode(value).decode("ascii") for key, value in record.data.items()
        },
    }


def _record_from_dict(entry: object) -> StoredRecord:
    if not isinstance(entry, dict):
        raise TypeError("entry must be an object")
    raw_data = entry.get("data") or {}
    if not isinstance(raw_data, dict):
        raise TypeError("record 'data' must be an object")
    return StoredRecord(
        name=str(entry["name"]),
        namespace=str(entry["namespace"]),
        type=str(entry.get("type", "")),
        data={str(k): base64.b64decode(str(v), validate=True) for k, v in raw_data.items()},
    )
