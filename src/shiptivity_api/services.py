"""
Client board operations used by the HTTP routers.

``update_client`` is the only operation that writes. It validates the whole
partial update before touching the store, applies it in one store
transaction and answers with the full board, so callers always see the
post-update state of every column.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .errors import NoFieldsToUpdate, RecordNotFound
from .models import ClientEntity
from .repositories import Repository
from .validators import validate_identifier, validate_priority, validate_status

logger = logging.getLogger(__name__)


def _collect_changes(partial: Mapping[str, Any]) -> Dict[str, Any]:
    # Absent and null fields are left unchanged.
    changes: Dict[str, Any] = {}
    if partial.get("status") is not None:
        changes["status"] = validate_status(partial["status"])
    if partial.get("priority") is not None:
        changes["priority"] = validate_priority(partial["priority"])
    return changes


# PUBLIC_INTERFACE
def update_client(repo: Repository, id_raw: Any, partial: Mapping[str, Any]) -> List[ClientEntity]:
    """
    Apply a partial status/priority update to one client and return the board.

    Args:
        repo: Client store.
        id_raw: Client id as received (path segment or int).
        partial: Mapping that may hold "status" and/or "priority"; other keys are ignored.

    Returns:
        Every client in the store, read after the write.

    Raises:
        InvalidIdentifier / RecordNotFound: bad or unknown id.
        InvalidStatus / InvalidPriority: a supplied field is invalid; nothing is written.
        NoFieldsToUpdate: neither field was supplied.
        StoreError: the store failed; not retried.
    """
    client = validate_identifier(repo, id_raw)
    client_id = client["id"]

    changes = _collect_changes(partial)
    if not changes:
        raise NoFieldsToUpdate()

    # update_fields re-checks existence inside the write transaction.
    if not repo.update_fields(client_id, changes):
        logger.info("Client %s disappeared before update", client_id)
        raise RecordNotFound()
    logger.info("Updated client %s: %s", client_id, changes)

    return repo.list()


# PUBLIC_INTERFACE
def list_clients(repo: Repository, status: Optional[Any] = None) -> List[ClientEntity]:
    """Return all clients, or only those in the given status column."""
    if status is None:
        return repo.list()
    return repo.list(status=validate_status(status))


# PUBLIC_INTERFACE
def get_client(repo: Repository, id_raw: Any) -> ClientEntity:
    """Return one client by id."""
    return validate_identifier(repo, id_raw)
