"""Credential store contract.

TokenStoreClient defines the three operations the token service needs
from a remote credential store. Concrete backends live alongside this
module; the real control-plane client is expected to implement the same
interface.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class StoredRecord:
    """A namespaced key/value secret as held by the credential store.

    Parameters
    ----------
    name:
        Record name, unique within its namespace.
    namespace:
        Namespace the record lives in.
    type:
        Type discriminator used for list selection.
    data:
        Opaque string keys mapped to byte values.
    """

    name: str
    namespace: str
    type: str
    data: dict[str, bytes] = field(default_factory=dict)


class TokenStoreClient(ABC):
    """Abstract base class for credential store backends."""

    @abstractmethod
    def create(self, namespace: str, record: StoredRecord) -> None:
        """Persist a new record.

        Raises
        ------
        AlreadyExistsError
            If a record with the same name already exists in *namespace*.
        StoreError
            On any other store failure.
        """

    @abstractmethod
    def list(self, namespace: str, type_selector: str) -> list[StoredRecord]:
        """Return every record in *namespace* whose type equals *type_selector*.

        Raises
        ------
        StoreError
            If the store cannot be enumerated.
        """

    @abstractmethod
    def delete(self, namespace: str, name: str) -> None:
        """Remove a record.

        Raises
        ------
        NotFoundError
            If no record with *name* exists in *namespace*.
        StoreError
            On any other store failure.
        """
