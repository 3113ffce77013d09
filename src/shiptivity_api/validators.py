from __future__ import annotations

import re
from typing import Any

from .errors import InvalidIdentifier, InvalidPriority, InvalidStatus, RecordNotFound
from .models import MAX_INTEGER, STATUSES, ClientEntity
from .repositories import Repository

_INT_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


def _parse_int(value: Any) -> int:
    """
    Strict integer parsing shared by id and priority checks.
    Accepts ints (not bools) and strings holding an integer; raises ValueError otherwise.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.fullmatch(value):
        return int(value)
    raise ValueError(f"not an integer: {value!r}")


# PUBLIC_INTERFACE
def parse_identifier(raw: Any) -> int:
    """Parse a client id, raising InvalidIdentifier when it is not an integer."""
    try:
        return _parse_int(raw)
    except ValueError as e:
        raise InvalidIdentifier() from e


# PUBLIC_INTERFACE
def validate_identifier(repo: Repository, raw: Any) -> ClientEntity:
    """
    Parse the id and confirm a client with that id exists.

    Returns the looked-up record so callers need not fetch it again.

    Raises:
        InvalidIdentifier: raw is not an integer.
        RecordNotFound: no client has that id.
        StoreError: the lookup itself failed.
    """
    client_id = parse_identifier(raw)
    if not (1 <= client_id <= MAX_INTEGER):
        # No stored client can carry this id.
        raise RecordNotFound()
    client = repo.get(client_id)
    if client is None:
        raise RecordNotFound()
    return client


# PUBLIC_INTERFACE
def validate_status(value: Any) -> str:
    """Return value if it is one of STATUSES (exact, case-sensitive match)."""
    if not isinstance(value, str) or value not in STATUSES:
        raise InvalidStatus()
    return value


# PUBLIC_INTERFACE
def validate_priority(value: Any) -> int:
    """Return value as an int if it is an integer in 1..MAX_INTEGER."""
    try:
        priority = _parse_int(value)
    except ValueError as e:
        raise InvalidPriority() from e
    if not (1 <= priority <= MAX_INTEGER):
        raise InvalidPriority()
    return priority
