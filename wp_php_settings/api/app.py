"""FastAPI application factory and entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.config import get_settings
from ..core.exceptions import (
    ConfigFileNotWritableError,
    HistoryEntryNotFoundError,
    ImportPayloadError,
    OptionStoreError,
)
from ..services.settings_service import SettingsService, package_version
from ..utils.logging_config import configure_logging
from .middleware import CSRFCheckMiddleware, RequestLoggingMiddleware
from .routes import router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(
        settings.log_level,
        json_output=settings.json_logs,
        site_root=str(settings.paths.root_dir),
    )

    # A service set on app.state before startup is kept as is.
    if getattr(app.state, "service", None) is None:
        app.state.service = SettingsService.create(settings)
    logger.info("service_started", root_dir=str(settings.paths.root_dir))

    yield

    logger.info("service_stopped")


def create_app() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(
        title="WP PHP Settings",
        description="Manage PHP directives and WordPress constants of a WordPress install",
        version=package_version(),
        lifespan=lifespan,
    )

    @app.exception_handler(HistoryEntryNotFoundError)
    async def history_not_found_handler(
        _request: Request, exc: HistoryEntryNotFoundError
    ) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ImportPayloadError)
    async def import_payload_handler(_request: Request, exc: ImportPayloadError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigFileNotWritableError)
    async def config_not_writable_handler(
        _request: Request, exc: ConfigFileNotWritableError
    ) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(OptionStoreError)
    async def option_store_handler(_request: Request, exc: OptionStoreError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    settings = get_settings()
    if settings.cors_origins is not None:
        origins = settings.cors_origins
    elif settings.debug:
        origins = ["*"]
    else:
        origins = [settings.site_url]

    # Browsers reject credentials combined with a wildcard origin
    allow_credentials = "*" not in origins

    app.add_middleware(CSRFCheckMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(router, prefix="/api/v1")

    return app


app = create_app()
