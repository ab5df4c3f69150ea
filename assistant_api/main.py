"""Main FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant_api.core.errors import register_exception_handlers
from assistant_api.core.logging import configure_logging
from assistant_api.core.middleware import request_logging_middleware
from assistant_api.core.settings import get_settings
from assistant_api.db.vector_store import close_vector_store, open_vector_store
from assistant_api.features.entities.registry import ENTITY_KINDS, get_kind_spec
from assistant_api.features.entities.router import router as entities_router
from assistant_api.features.search.router import router as search_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.
    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)

    client = await open_vector_store(app, settings)
    logger.info("Vector store client ready for %s", client.base_url)

    yield

    # Shutdown
    logger.info("Shutting down application")
    await close_vector_store(app)
    logger.info("Vector store client closed.")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Uniform REST API over personal data kept in a vector store",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_logging_middleware)

    register_exception_handlers(app)

    # Include routers
    app.include_router(entities_router, prefix="/api")
    app.include_router(search_router, prefix="/api")

    @app.get("/")
    async def root() -> dict[str, Any]:  # pyright: ignore[reportUnusedFunction]
        """Describe the API surface."""
        collections = [f"/api/{get_kind_spec(kind).plural}" for kind in ENTITY_KINDS]
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "endpoints": {
                "health": "GET /health",
                "collections": collections,
                "entities": "GET|DELETE /api/entities/{id}, POST /api/entities/delete, POST /api/entities/get",
                "search": "GET|POST /api/search",
                "stats": "GET /api/stats",
            },
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:  # pyright: ignore[reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "assistant_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )
