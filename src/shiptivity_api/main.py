"""
FastAPI application for the Shiptivity clients board.

``create_app`` assembles the app: logging, CORS, error handlers, routers and
a lifespan that opens the client store on startup and closes it on shutdown.
``app`` is built at import time so ASGI servers can find it::

    uvicorn shiptivity_api.main:app

``run`` is the console entry point; it serves ``app`` with uvicorn on the
configured host and port. Uvicorn turns SIGINT/SIGTERM into a lifespan
shutdown, so the store connection is closed before the process exits.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import ClientsAPIError, StoreError
from .logging_config import setup_logging
from .repositories import Repository, build_repository
from .routers import clients as clients_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "clients",
        "description": "Read clients and move them between board columns or change their priority.",
    },
]


# PUBLIC_INTERFACE
def create_app(repository: Optional[Repository] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: Store to serve. When omitted one is built from settings at startup.
        settings: Configuration; read from the environment when omitted.

    Returns:
        A configured FastAPI instance. The store is closed when the app shuts down.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        repo = repository if repository is not None else build_repository(settings)
        app.state.repository = repo
        try:
            yield
        finally:
            try:
                repo.close()
            except StoreError as e:
                logger.error("Error closing database: %s", e.long_message)

    app = FastAPI(
        title="Shiptivity API",
        description="Backend API for the Shiptivity clients board.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # '*' or an empty list allows every origin
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ClientsAPIError)
    async def clients_api_error_handler(request: Request, exc: ClientsAPIError) -> JSONResponse:
        """
        Render API errors as {"message": ..., "long_message": ...}.
        """
        if isinstance(exc, StoreError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.long_message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return the API error shape for request bodies that fail schema validation.

        Response format:
            {
                "message": "Request validation failed",
                "long_message": "...",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "message": "Request validation failed",
                "long_message": "Request body must be a JSON object with optional status and priority.",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object pointing callers at the API docs.
        """
        return {"message": "SHIPTIVITY API. Read documentation to see API docs"}

    app.include_router(clients_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


app = create_app()


if __name__ == "__main__":
    run()
