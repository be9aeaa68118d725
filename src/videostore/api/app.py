"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from videostore import __version__
from videostore.config import get_settings
from videostore.exceptions import VideoStoreError, http_status_for
from videostore.transport.base import DeviceConnector
from videostore.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    setup_logging(level=get_settings().log_level)
    logger.info("videostore_api_starting")
    yield
    logger.info("videostore_api_stopped")


async def _videostore_error_handler(request: Request, exc: VideoStoreError) -> JSONResponse:
    status = http_status_for(exc)
    logger.warning(
        "api_request_failed",
        path=request.url.path,
        status=status,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def create_app(
    enable_ui: bool = True,
    connector: DeviceConnector | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        enable_ui: Whether to mount the NiceGUI control panel.
        connector: Machine connector to use instead of the installed default.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="videostore API",
        description="Fetch clips and storage state from remote video-store resources",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.connector = connector

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(VideoStoreError, _videostore_error_handler)

    from videostore.api.routes import machines
    app.include_router(machines.router, prefix="/api")

    if enable_ui:
        try:
            from videostore.ui.main import setup_ui
            setup_ui(app, connector=connector)
        except ImportError:
            logger.warning("nicegui_not_available", msg="Web panel disabled")

    return app
