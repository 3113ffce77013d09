from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..repositories import Repository, get_repository
from ..schemas import ClientOut, ClientUpdate, ErrorOut
from ..services import get_client, list_clients, update_client

router = APIRouter(
    prefix="/api/v1/clients",
    tags=["clients"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[ClientOut],
    summary="List Clients",
    description=(
        "List every client on the board.\n\n"
        "Query parameters:\n"
        "- status: only return clients in this column (backlog, in-progress, complete)"
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"model": ErrorOut, "description": "Invalid status"},
        500: {"model": ErrorOut, "description": "Store error"},
    },
)
def list_clients_endpoint(
    status: Optional[str] = Query(None, description="Filter by status column"),
    repo: Repository = Depends(get_repository),
) -> List[ClientOut]:
    """
    List clients, optionally filtered by status.
    """
    return [ClientOut(**c) for c in list_clients(repo, status)]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{client_id}",
    response_model=ClientOut,
    summary="Get Client",
    description="Get a single client by ID.",
    responses={
        200: {"description": "Client found"},
        400: {"model": ErrorOut, "description": "Id is not an integer"},
        404: {"model": ErrorOut, "description": "Client not found"},
    },
)
def get_client_endpoint(client_id: str, repo: Repository = Depends(get_repository)) -> ClientOut:
    """
    Retrieve a single client by its ID.
    """
    return ClientOut(**get_client(repo, client_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.put(
    "/{client_id}",
    response_model=List[ClientOut],
    summary="Update Client",
    description=(
        "Change the status and/or priority of a client. Fields left out of the body are "
        "unchanged. The whole request is rejected if any supplied field is invalid. "
        "Returns every client after the update."
    ),
    responses={
        200: {"description": "Client updated; full client list returned"},
        400: {"model": ErrorOut, "description": "Invalid id, status or priority, or no fields supplied"},
        404: {"model": ErrorOut, "description": "Client not found"},
        500: {"model": ErrorOut, "description": "Store error"},
    },
)
def put_client(
    client_id: str,
    payload: Optional[ClientUpdate] = None,
    repo: Repository = Depends(get_repository),
) -> List[ClientOut]:
    """
    Partial update of a client's status/priority.
    """
    clients = update_client(repo, client_id, payload.partial() if payload else {})
    return [ClientOut(**c) for c in clients]  # type: ignore[arg-type]
