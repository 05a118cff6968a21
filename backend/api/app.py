"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings as get_app_settings
from .config import get_settings
from .dependencies import get_container
from .error_handlers import register_error_handlers
from .routes import health, users
from modules.auth.routes import router as auth_router
from modules.workspaces.routes import router as workspaces_router
from modules.notifications.routes import router as notifications_router
from modules.realtime.routes import router as realtime_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    app_settings = get_app_settings()
    logger.info(
        "Starting SprintDesk API on %s:%s (environment=%s, storage=%s)",
        settings.host,
        settings.port,
        app_settings.environment,
        app_settings.storage_backend,
    )
    if app_settings.is_production and app_settings.jwt_secret == "dev_secret":
        logger.warning("JWT_SECRET is the development default in production")
    yield
    # Shutdown
    await get_container().broadcaster.flush()
    logger.info("Shutting down SprintDesk API")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.app_name,
        description="Multi-tenant issue tracker backend",
        version=app_settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_error_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(workspaces_router, prefix="/api/workspaces", tags=["workspaces"])
    app.include_router(notifications_router, prefix="/api/notifications", tags=["notifications"])
    app.include_router(realtime_router, prefix="/api", tags=["realtime"])

    return app


# Application instance for uvicorn
app = create_app()
