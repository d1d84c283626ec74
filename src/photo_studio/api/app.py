"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_studio.api.contact import router as contact_router
from photo_studio.api.photos import router as photos_router
from photo_studio.api.price_lists import router as price_lists_router
from photo_studio.app_logging import configure_logging
from photo_studio.containers import AppContainer
from photo_studio.errors import AppError

API_PREFIX = "/api"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Token"],
    )

    api = APIRouter(prefix=API_PREFIX)

    @api.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    api.include_router(photos_router)
    api.include_router(price_lists_router)
    api.include_router(contact_router)
    app.include_router(api)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                exc.message,
                extra={"path": request.url.path, "meta": exc.meta},
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            [_validation_issue(error) for error in exc.errors()],
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route not found: {request.method} {request.url.path}"
        else:
            message = str(exc.detail)
        return _error_response(exc.status_code, message, None, exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            extra={"path": request.url.path, "method": request.method},
        )
        meta = None
        if settings.environment != "production":
            meta = {"error": f"{type(exc).__name__}: {exc}"}
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", meta
        )

    return app


def _error_response(
    status_code: int,
    message: str,
    meta: object | None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "message": message, "meta": meta},
        headers=headers,
    )


def _validation_issue(error: dict) -> dict[str, str]:
    """Flatten a pydantic error into ``{path, message}``."""
    location = [str(part) for part in error.get("loc", ())]
    if location and location[0] in {"body", "query", "path", "header"}:
        location = location[1:]
    return {"path": ".".join(location), "message": error.get("msg", "Invalid value")}
