from __future__ import annotations

from typing import Any, Tuple, TypedDict

# Fixed workflow column set; order matches the board left to right.
STATUSES: Tuple[str, ...] = ("backlog", "in-progress", "complete")

# Columns the update endpoint is allowed to change.
MUTABLE_FIELDS: Tuple[str, ...] = ("status", "priority")

# Largest integer the SQLite store can hold (signed 64-bit).
MAX_INTEGER = 2**63 - 1


# PUBLIC_INTERFACE
class ClientEntity(TypedDict):
    """
    A lightweight domain model representing a client card on the board.

    Fields:
    - id: Unique integer identifier, assigned when the client is created
    - name: Opaque display name, returned as stored
    - description: Opaque free text, returned as stored
    - status: One of STATUSES
    - priority: Positive integer; duplicates across clients are allowed
    """

    id: int
    name: Any
    description: Any
    status: str
    priority: int
