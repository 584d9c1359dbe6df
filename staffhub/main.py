"""
StaffHub API - FastAPI Application
Main entry point with all routes configured.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staffhub.api import admin, auth, communications, companies, credentials, dashboard, employees
from staffhub.client import BackendClient
from staffhub.config import Settings, get_settings
from staffhub.core.exceptions import register_exception_handlers
from staffhub.core.logging_config import configure_logging
from staffhub.schemas.common import ERROR_RESPONSES, HealthResponse

logger = logging.getLogger(__name__)


def check_configuration(settings: Settings) -> None:
    """
    Production refuses to start without the backend endpoint and keys.
    In DEV_MODE the app starts anyway and backend calls fail per request.
    """
    if not settings.DEV_MODE:
        settings.validate_for_server()
        return
    missing = settings.missing_server_fields()
    if missing:
        logger.warning(f"DEV_MODE: backend configuration incomplete, missing {', '.join(missing)}")


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> FastAPI:
    """Build the application with its backend clients attached to app.state."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    check_configuration(settings)

    backend = BackendClient.from_settings(settings, "anon", http_client)
    service_backend = (
        BackendClient.from_settings(settings, "service", http_client)
        if settings.service_key_configured else None
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} starting")
        yield
        await backend.aclose()
        if service_backend:
            await service_backend.aclose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="HR communication dashboard: companies, employees and messaging",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.backend = backend
    app.state.service_backend = service_backend

    # CORS Configuration
    origins = [settings.FRONTEND_URL]
    if settings.DEV_MODE:
        origins = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include all routers
    for module in (auth, companies, employees, communications, dashboard, credentials):
        app.include_router(module.router, prefix=settings.API_PREFIX, responses=ERROR_RESPONSES)
    if settings.FEATURE_ADMIN_API:
        app.include_router(admin.router, prefix=settings.API_PREFIX, responses=ERROR_RESPONSES)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "message": f"{settings.APP_NAME} is running",
            "version": settings.APP_VERSION,
            "docs": "/docs"
        }

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Detailed health check."""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "backend_configured": settings.backend_configured,
            "service_key_configured": settings.service_key_configured,
        }

    return app


app = create_app()
