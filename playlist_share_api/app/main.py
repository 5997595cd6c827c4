"""
Main entrypoint for the Playlist Share API.

This module assembles the FastAPI application, sets up logging,
installs the error handlers and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn playlist_share_api.app.main:app --reload

Every error leaves the service in the same JSON shape as a success::

    {"result": false, "status": 404, "error": "playlist not found"}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.endpoints import initialize
from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ServiceError
from .core.logging_config import setup_logging
from .schemas.playlist import BasicResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    body = BasicResponse(result=False, status=status_code, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    logger.info("%s %s %s error: %s", request.method, request.url.path, exc.status_code, exc.message)
    return _error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("%s %s %s error: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = "bad " + ", ".join(fields) if fields else "bad request"
    logger.info("%s %s 400 error: %s", request.method, request.url.path, message)
    return _error_response(400, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    return _error_response(500, "internal server error")


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first, so the imports and startup below can log.
    setup_logging()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(v1_router, prefix="/api")
    app.include_router(initialize.router, tags=["initialize"])

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "healthy"}

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file if needed and applies migrations.
        init_db()

    return app


app = create_app()
