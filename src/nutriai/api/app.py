"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nutriai.api.assistant import router as assistant_router
from nutriai.api.auth import router as auth_router
from nutriai.api.diary import router as diary_router
from nutriai.api.mood_board import router as mood_board_router
from nutriai.app_logging import configure_logging
from nutriai.config import parse_allowed_origins
from nutriai.containers import AppContainer
from nutriai.domain.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    NotFoundError,
    NutriAIError,
    PermissionDeniedError,
    QuotaExceededError,
    ServiceError,
    StorageError,
    ValidationError,
)

ERROR_STATUS_CODES: dict[type[NutriAIError], int] = {
    ValidationError: 400,
    InvalidCredentialsError: 401,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    AlreadyExistsError: 409,
    QuotaExceededError: 429,
    StorageError: 503,
    ServiceError: 502,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting with %s storage backend", container.persistence.backend_name
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NutriAIError)
    async def handle_app_error(request: Request, exc: NutriAIError) -> JSONResponse:
        status_code = error_status_code(exc)
        if status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.code, "detail": str(exc)},
        )

    app.include_router(auth_router)
    app.include_router(diary_router)
    app.include_router(assistant_router)
    app.include_router(mood_board_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def error_status_code(exc: NutriAIError) -> int:
    """Return the HTTP status for an application error."""
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500
