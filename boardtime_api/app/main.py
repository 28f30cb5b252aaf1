"""
Main entrypoint for the BoardTime API.

This module assembles the FastAPI application, sets up logging, CORS
and error rendering, and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``::

    uvicorn boardtime_api.app.main:app --reload

Routes are mounted under ``/api`` because that is where the
front‑end's rewrite rule (``/api/be/:path*`` -> ``<backend>/api/:path*``)
sends its requests.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.exceptions import BoardTimeError
from .core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" element of the location.
        loc = ".".join(str(p) for p in error.get("loc", ())[1:]) or "request"
        parts.append(f"{loc}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Creates the database file if needed and brings the schema up to date.
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Performs one‑time setup: logging, CORS, exception handlers that
    render every error as ``{"error": <message>}`` and the versioned
    routers.  Database migrations run from the ``lifespan`` hook.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(BoardTimeError)
    async def boardtime_error_handler(request: Request, exc: BoardTimeError) -> JSONResponse:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_errors(exc)
        logger.warning("Validation error for %s: %s", request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    app.include_router(v1_router, prefix="/api")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
