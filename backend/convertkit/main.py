"""ASGI entry-point for the FastAPI application.

This module
1. instantiates the :class:`fastapi.FastAPI` application from an explicit
   :class:`~convertkit.config.Settings` object;
2. builds the staging storage, the strategy registry and the request
   pipeline and stores them on ``app.state``;
3. wires the API routers located in ``convertkit.api``;
4. registers global exception handlers and middleware; and
5. performs a few start-up sanity checks (log directory, staging directory
   writable, …).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from convertkit.api import api_router
from convertkit.config import Settings
from convertkit.config import settings as default_settings
from convertkit.exceptions import AppBaseException
from convertkit.logging_config import setup_logging
from convertkit.pipeline import ConversionPipeline
from convertkit.services.registry import build_default_registry
from convertkit.utils.storage import TemporaryStorage, ensure_dir_exists


# ---------------------------------------------------------------------------
# Logging must be configured as soon as possible so that any errors during
# import/start-up are captured.
# ---------------------------------------------------------------------------
setup_logging(default_settings.LOG_DIR, default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:  # noqa: D401 – factory nomenclature is fine
    """Wire and return the FastAPI application instance."""

    settings = settings or default_settings

    app = FastAPI(
        title="ConvertKit API",
        version="0.1.0",
        docs_url="/api/docs",
    )

    storage = TemporaryStorage(settings.STAGING_DIR, settings.max_upload_size_bytes)
    app.state.settings = settings
    app.state.storage = storage
    app.state.pipeline = ConversionPipeline(build_default_registry(settings), storage)

    # ------------------------------------------------------------------
    # Start-up checks – run synchronously because FastAPI will await them.
    # ------------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_checks() -> None:  # noqa: D401
        logger.info("Running start-up checks …")

        for path in (settings.LOG_DIR, settings.STAGING_DIR):
            try:
                ensure_dir_exists(Path(path))
            except OSError as exc:  # pragma: no cover
                logger.critical("Cannot create/access directory %s – %s", path, exc)
            else:
                writable = os.access(str(path), os.W_OK)
                logger.info("Directory %s is %swritable", path, "" if writable else "NOT ")

        logger.info(
            "Upload limit %d MB, ffmpeg=%s, soffice=%s, process timeout=%s",
            settings.MAX_UPLOAD_SIZE_MB,
            settings.FFMPEG_PATH,
            settings.SOFFICE_PATH,
            settings.process_timeout,
        )
        logger.info("Start-up checks finished.")

    # ------------------------------------------------------------------
    # Exception handlers – every error body is ``{"error": ..., "details"?: ...}``
    # ------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(  # noqa: D401
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.error("Request validation error: %s", exc.errors())
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": str(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(  # noqa: D401
        _request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.error("HTTP exception %s: %s", exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(AppBaseException)
    async def _app_error_handler(  # noqa: D401
        _request: Request,
        exc: AppBaseException,
    ) -> JSONResponse:  # type: ignore[valid-type]
        if exc.status_code >= 500:
            logger.error("Application exception: %s", exc, exc_info=exc.__cause__ is not None)
        else:
            logger.warning("Rejected request: %s", exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(Exception)
    async def _generic_error_handler(  # noqa: D401
        _request: Request,
        exc: Exception,
    ) -> JSONResponse:  # type: ignore[valid-type]
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------------------------------------------------
    # Routers
    # ------------------------------------------------------------------

    app.include_router(api_router, prefix="/api")

    @app.get("/api/health")
    async def _health() -> dict[str, str]:  # noqa: D401
        return {"status": "ok"}

    return app


# Instantiate at import time so `uvicorn convertkit.main:app` works.
app: FastAPI = create_app()
