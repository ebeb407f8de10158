from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import INTERNAL_ERROR_MESSAGE, INVALID_JSON_MESSAGE, StoreError, TaskApiError, ValidationError
from .logging_setup import setup_logging
from .repositories import get_repository
from .routers import tasks as tasks_router
from .settings import Settings, get_settings
from .utils import error_body, summarize_validation_errors

logger = logging.getLogger(__name__)

_NOT_AN_OBJECT = {"model_attributes_type", "model_type", "dict_type"}

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "CRUD operations for Task items.",
    },
]


def _validation_message(request: Request, exc: RequestValidationError) -> str:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return INVALID_JSON_MESSAGE
    # A body that parsed as something other than a JSON object (non-JSON content
    # type, array, scalar) fails at the top level of the body.
    if any(tuple(e.get("loc", ())) == ("body",) and e.get("type") in _NOT_AN_OBJECT for e in errors):
        return INVALID_JSON_MESSAGE
    if errors and all(e.get("loc", ("",))[0] == "body" for e in errors):
        endpoint = request.scope.get("endpoint")
        message = tasks_router.BODY_VALIDATION_MESSAGES.get(endpoint)  # type: ignore[arg-type]
        if message:
            return message
    return ValidationError.default_message


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return 400 with a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "<message>",
                "detail": [{"loc": [...], "msg": "...", "type": "..."}, ...]
            }
        """
        return JSONResponse(
            status_code=ValidationError.status_code,
            content=error_body(
                _validation_message(request, exc),
                summarize_validation_errors(exc.errors()),
            ),
        )

    @app.exception_handler(TaskApiError)
    async def task_api_exception_handler(request: Request, exc: TaskApiError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        else:
            logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR_MESSAGE))


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application for the given settings.

    The task store is created when the application starts and closed when it
    shuts down; handlers reach it through app.state.repository.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.repository = get_repository(settings)
        try:
            yield
        finally:
            app.state.repository.close()
            logger.info("Task store closed backend=%s", settings.persistence_backend)

    app = FastAPI(
        title="Task Backend",
        description="Backend API service for managing tasks with pluggable storage backends.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(tasks_router.router)
    return app


app = create_app()
