"""
FastAPI application for the Notebook Relay service.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config.settings import get_settings
from ..core.exceptions import BaseRelayException, HTTPStatusMapper
from ..core.logging import setup_logging
from ..utils.urls import is_valid_url
from ..webhooks.api import (
    HTTPClientFactory,
    SettingsProvider,
    create_relay_router,
    json_response,
)

SERVICE_NAME = "notebook-relay"


def create_app(
    settings_provider: SettingsProvider | None = None,
    http_client_factory: HTTPClientFactory | None = None,
    configure_logging: bool = False,
) -> FastAPI:
    """
    Create the relay application.

    Args:
        settings_provider: Callable returning settings (defaults to get_settings)
        http_client_factory: Callable returning the outbound httpx client
        configure_logging: Install the loguru sink on startup

    Returns:
        Configured FastAPI application
    """
    settings_provider = settings_provider or get_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = settings_provider()
        if configure_logging:
            setup_logging(SERVICE_NAME, settings.log_level, settings.log_json)
        logger.info("🚀 Starting Notebook Relay")
        for key, value in settings.log_configuration().items():
            logger.info("{}: {}", key, value)
        yield
        logger.info("🛑 Shutting down Notebook Relay")

    app = FastAPI(
        title="Notebook Relay",
        description="Relays document-processing and chat requests to external webhooks",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(
        create_relay_router(
            settings_provider=settings_provider,
            http_client_factory=http_client_factory,
        )
    )

    @app.exception_handler(BaseRelayException)
    async def relay_exception_handler(request: Request, exc: BaseRelayException) -> JSONResponse:
        logger.error(f"Unhandled relay error on {request.url.path}: {exc.message}")
        return json_response(
            {"error": exc.message, "error_code": exc.error_code or type(exc).__name__},
            HTTPStatusMapper.status_for(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        response = json_response({"error": exc.detail}, exc.status_code)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unexpected error on {request.url.path}: {exc!r}")
        return json_response({"error": "Internal server error", "details": str(exc)}, 500)

    @app.get("/")
    async def root():
        """Service information."""
        settings = settings_provider()
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "configuration": settings.presence(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health")
    async def health_check():
        """Liveness plus configuration readiness per handler."""
        settings = settings_provider()
        document_ready = bool(settings.document_processing_webhook_url) and is_valid_url(
            settings.document_processing_webhook_url
        )
        chat_ready = (
            bool(settings.notebook_chat_url)
            and is_valid_url(settings.notebook_chat_url)
            and bool(settings.notebook_generation_auth)
        )
        return {
            "service": SERVICE_NAME,
            "status": "healthy" if document_ready and chat_ready else "degraded",
            "handlers": {
                "process_document": "ready" if document_ready else "misconfigured",
                "send_chat_message": "ready" if chat_ready else "misconfigured",
            },
            "configuration": settings.presence(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app(configure_logging=True)
