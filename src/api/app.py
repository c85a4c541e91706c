"""FastAPI application factory and configuration.

This module provides the main FastAPI application with CORS configuration,
lifespan management, and route registration.

Example:
    from src.api import create_app

    app = create_app()

    # Run with uvicorn:
    # uvicorn src.api.app:app --reload
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import AppState, get_app_state
from src.api.routes import catalog_router, health_router, library_router
from src.core.health import HealthChecker, ServiceCheck, ServiceStatus
from src.core.logging import get_logger

logger = get_logger(__name__)

APP_VERSION = os.getenv("APP_VERSION", "1.0.0")


def _create_health_checker(app_state: AppState) -> HealthChecker:
    """Create health checker with service checks for the API.

    Args:
        app_state: The application state container.

    Returns:
        Configured HealthChecker instance.
    """
    checker = HealthChecker(version=APP_VERSION)

    async def check_document_store() -> ServiceCheck:
        if not app_state.is_initialized:
            return ServiceCheck(
                name="document_store",
                status=ServiceStatus.UNHEALTHY,
                message="App state not initialized",
            )
        _ = app_state.gateway
        return ServiceCheck(
            name="document_store",
            status=ServiceStatus.HEALTHY,
            message=f"Connected ({app_state.backend})",
        )

    async def check_tmdb() -> ServiceCheck:
        if not app_state.is_initialized:
            return ServiceCheck(
                name="tmdb",
                status=ServiceStatus.UNHEALTHY,
                message="App state not initialized",
            )
        if app_state.catalog.is_configured:
            return ServiceCheck(
                name="tmdb",
                status=ServiceStatus.HEALTHY,
                message="Access token configured",
            )
        return ServiceCheck(
            name="tmdb",
            status=ServiceStatus.DEGRADED,
            message="Access token not configured",
        )

    checker.add_check("document_store", check_document_store)
    checker.add_check("tmdb", check_tmdb)

    return checker


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    logger.info("api_starting")

    app_state = get_app_state()

    await app_state.initialize(
        store_backend=os.getenv("STORE_BACKEND", "firestore"),
        firestore_project=os.getenv("FIRESTORE_PROJECT"),
        firestore_database=os.getenv("FIRESTORE_DATABASE"),
        tmdb_access_token=os.getenv("TMDB_ACCESS_TOKEN"),
    )

    app.state.health_checker = _create_health_checker(app_state)

    logger.info("api_started", version=APP_VERSION)

    yield

    logger.info("api_shutting_down")
    await app_state.shutdown()
    logger.info("api_shutdown_complete")


def create_app(
    title: str = "Marquee API",
    description: str = "Movie and TV catalog with per-user favorites and watchlist",
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI docs.
        description: API description for OpenAPI docs.
        cors_origins: List of allowed CORS origins. Defaults to the
            comma-separated CORS_ORIGINS env var, or ["*"].

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=title,
        description=description,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    if cors_origins is None:
        cors_origins_env = os.getenv("CORS_ORIGINS", "*")
        if cors_origins_env == "*":
            cors_origins = ["*"]
        else:
            cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(catalog_router)
    app.include_router(library_router)

    logger.info("app_configured", title=title, cors_origins=cors_origins)

    return app


# Default app instance for uvicorn
app = create_app()
