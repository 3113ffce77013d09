from __future__ import annotations

from typing import Dict, Optional


class ClientsAPIError(Exception):
    """
    Base class for errors reported to API callers.

    Every error carries a short ``message`` and a human readable
    ``long_message``; ``status_code`` is the HTTP status used when the error
    reaches the exception handler in main.
    """

    status_code: int = 400
    default_message: str = "Request failed."
    default_long_message: str = ""

    def __init__(self, message: Optional[str] = None, long_message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.long_message = long_message if long_message is not None else self.default_long_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "long_message": self.long_message}


class InvalidIdentifier(ClientsAPIError):
    default_message = "Invalid id provided."
    default_long_message = "Id can only be integer."


class RecordNotFound(InvalidIdentifier):
    """A well-formed id that matches no stored client."""

    status_code = 404
    default_long_message = "Cannot find client with that id."


class InvalidStatus(ClientsAPIError):
    default_message = "Invalid status provided."
    default_long_message = (
        "Status can only be one of the following: [backlog | in-progress | complete]."
    )


class InvalidPriority(ClientsAPIError):
    default_message = "Invalid priority provided."
    default_long_message = "Priority can only be positive integer."


class NoFieldsToUpdate(ClientsAPIError):
    default_message = "No valid fields to update."
    default_long_message = "Supply at least one of: status, priority."


class StoreError(ClientsAPIError):
    """Failure raised by the storage driver; long_message holds the driver text."""

    status_code = 500
    default_message = "DB error."
