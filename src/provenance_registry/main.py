"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.errors import register_exception_handlers
from .api.v1 import v1_router
from .config.settings import Settings, get_settings
from .core.logging import configure_logging
from .services.registry_service import RegistryService

logger = structlog.get_logger(module=__name__)


def create_app(settings: Optional[Settings] = None,
               registry: Optional[RegistryService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted
        registry: Registry to serve; built from settings when omitted
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan handler.

        Args:
            app: FastAPI application instance
        """
        # Startup
        configure_logging(settings)
        if registry is None:
            app.state.registry = RegistryService.from_settings(settings)
        logger.info(
            "Starting Provenance Registry",
            version=__version__,
            environment=settings.app_env,
            debug_mode=settings.app_debug,
            snapshot_backend=settings.snapshot_backend
        )
        app.state.registry.startup()

        yield

        # Shutdown
        logger.info("Shutting down Provenance Registry")
        app.state.registry.shutdown()

    app = FastAPI(
        title=settings.app_name,
        description="Authoritative registry of products, their supply-chain history and authenticity verifications",
        version=__version__,
        lifespan=lifespan
    )
    if registry is not None:
        app.state.registry = registry

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(v1_router, prefix=settings.api_v1_prefix)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": settings.app_name,
            "version": __version__,
            "status": "operational",
            "docs": "/docs"
        }

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
