from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fastapi import Request

from .models import MUTABLE_FIELDS, ClientEntity
from .settings import Settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for client storage backends."""

    @abstractmethod
    def get(self, client_id: int) -> Optional[ClientEntity]:
        """Return a ClientEntity by id, or None if not found."""

    @abstractmethod
    def list(self, status: Optional[str] = None) -> List[ClientEntity]:
        """
        Return all clients ordered by id.
        - When status is given, only clients in that column are returned
        """

    @abstractmethod
    def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> bool:
        """
        Apply exactly the given column changes to one client.
        changes must be a non-empty subset of MUTABLE_FIELDS, else ValueError.

        The existence check and the write happen inside one store
        transaction. Return False, writing nothing, if the client does not
        exist at write time.
        """

    def close(self) -> None:
        """Release the underlying store handle. Safe to call more than once."""


def ensure_mutable_fields(changes: Mapping[str, Any]) -> None:
    if not changes:
        raise ValueError("No columns to update")
    unknown = set(changes) - set(MUTABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and ephemeral runs.
    """

    def __init__(self, clients: Iterable[ClientEntity] = ()) -> None:
        self._lock = RLock()
        self._items: Dict[int, ClientEntity] = {}
        for client in clients:
            self._items[client["id"]] = client.copy()  # type: ignore[assignment]

    def get(self, client_id: int) -> Optional[ClientEntity]:
        with self._lock:
            item = self._items.get(client_id)
            return None if item is None else item.copy()  # type: ignore[return-value]

    def list(self, status: Optional[str] = None) -> List[ClientEntity]:
        with self._lock:
            items = sorted(self._items.values(), key=lambda c: c["id"])
            if status is not None:
                items = [c for c in items if c["status"] == status]
            # Return copies to avoid external mutation
            return [c.copy() for c in items]  # type: ignore[misc]

    def update_fields(self, client_id: int, changes: Mapping[str, Any]) -> bool:
        ensure_mutable_fields(changes)
        with self._lock:
            existing = self._items.get(client_id)
            if existing is None:
                return False
            updated = existing.copy()
            updated.update(changes)  # type: ignore[typeddict-item]
            self._items[client_id] = updated  # type: ignore[assignment]
            return True


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Return the repository selected by settings.
    - memory: InMemoryRepository (empty)
    - sqlite: SQLiteRepository on settings.sqlite_db_path
    """
    if settings.persistence_backend == "memory":
        logger.info("Using in-memory client store")
        return InMemoryRepository()

    from .db import SQLiteRepository

    return SQLiteRepository(settings.sqlite_db_path)


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    FastAPI dependency returning the process-wide store opened at startup.
    """
    return request.app.state.repository
