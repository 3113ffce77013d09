from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class ClientUpdate(BaseModel):
    """
    Body of PUT /api/v1/clients/{id}.

    Both fields are optional and kept raw here; their values are checked by the
    validators so that bad input produces the API's own error body instead of
    a schema error. Unknown keys are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "status": "in-progress",
                "priority": 2,
            }
        },
    )

    status: Optional[Any] = Field(
        default=None, description="New status: one of backlog, in-progress, complete"
    )
    priority: Optional[Any] = Field(default=None, description="New priority: integer >= 1")

    def partial(self) -> Dict[str, Any]:
        """Return only the fields the caller actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# PUBLIC_INTERFACE
class ClientOut(BaseModel):
    """
    Schema returned by the API for a client.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Stark, White and Abbott",
                "description": "Cloned Optimal Architecture",
                "status": "in-progress",
                "priority": 1,
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the client")
    # Opaque columns, passed through without coercion
    name: Optional[Any] = Field(default=None, description="Client name")
    description: Optional[Any] = Field(default=None, description="Free text description")
    status: str = Field(..., description="Workflow column: backlog, in-progress or complete")
    priority: int = Field(..., description="Position hint within the column, >= 1")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """
    Error body returned for every rejected request.
    """

    message: str = Field(..., description="Short summary of the failure")
    long_message: str = Field(..., description="Human readable explanation")
    detail: Optional[List[Any]] = Field(
        default=None, description="Schema error details, only for malformed request bodies"
    )
