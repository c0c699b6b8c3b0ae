from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import StorageError, TodoNotFoundError
from .repositories import Repository, build_repository
from .routers import todos as todos_router
from .services import TodoService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "CRUD operations for Todo items."},
]

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Content-Type"]


def _decode_bytes(value: bytes) -> str:
    return value.decode("utf-8", "replace")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return 400 with a consistent JSON structure for malformed requests
    (bad path id, unparseable or non-JSON body, missing or blank title).

    Response format:
        {
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            # A non-JSON body arrives as raw bytes that may not be valid UTF-8
            "detail": jsonable_encoder(exc.errors(), custom_encoder={bytes: _decode_bytes}),
        },
    )


async def not_found_exception_handler(request: Request, exc: TodoNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "NotFound", "message": str(exc)},
    )


async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "StorageError", "message": "Storage failure"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "InternalError", "message": "Internal server error"},
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    """
    Build the FastAPI application and wire repository -> service -> routes.

    Serve directly with: uvicorn --factory todo_api.main:create_app

    Args:
        settings: Settings to use; read from the environment when omitted.
        repository: Storage backend; built from settings when omitted.
    """
    settings = settings or get_settings()
    repository = repository or build_repository(settings)

    app = FastAPI(
        title="Todo API",
        description="REST backend for a single todo list.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.todo_service = TodoService(repository)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_allowed_origin],
        allow_methods=CORS_ALLOWED_METHODS,
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(TodoNotFoundError, not_found_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(todos_router.router)
    logger.info("Todo API configured with %s backend", settings.persistence_backend)
    return app

