"""
Flowguard - Main FastAPI Application

This is the entry point for the FastAPI application.
It configures middleware, routes, and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .registry.loader import load_configured_registry
from .registry.node_registry import NodeRegistry
from .utils.logger import setup_logging, get_logger

# Setup logging first
setup_logging()
logger = get_logger(__name__)


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
        - Loads the node type registry once, unless one was injected

    The registry is immutable, so request handlers share it without locking.
    """
    logger.info("Starting Flowguard...")

    if getattr(app.state, "registry", None) is None:
        app.state.registry = load_configured_registry()

    logger.info(
        "Application started successfully",
        extra={"registry_size": len(app.state.registry.types())}
    )

    yield

    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(registry: Optional[NodeRegistry] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry: Registry to serve instead of the configured one

    Returns:
        Configured FastAPI application instance
    """
    application = FastAPI(
        title="Flowguard",
        description="Validation, scoring and auto-fix for generated n8n workflows",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.docs_enabled else None,
        redoc_url="/api/redoc" if settings.docs_enabled else None,
        openapi_url="/api/openapi.json" if settings.docs_enabled else None,
    )
    application.state.registry = registry

    _configure_middleware(application)
    register_error_handlers(application)
    _configure_routes(application)

    return application


def _configure_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    # allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )

    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    """Configure application routes."""
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health():
        """Health check endpoint, reports whether the registry is loaded."""
        registry = getattr(app.state, "registry", None)
        return {
            "status": "healthy" if registry is not None else "starting",
            "version": __version__,
            "environment": settings.environment,
            "registry_size": len(registry.types()) if registry is not None else 0,
        }

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Flowguard",
            "version": __version__,
            "docs": "/api/docs" if settings.docs_enabled else None
        }


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()
