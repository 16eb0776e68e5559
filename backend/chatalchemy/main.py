"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatalchemy.config import get_settings
from chatalchemy.infrastructure.dependencies import build_ingestion_service, get_knowledge_store
from chatalchemy.infrastructure.logging.log_config import setup_logging
from chatalchemy.presentation.api.v1.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and preload the backend dataset."""
    setup_logging()

    service = build_ingestion_service(get_knowledge_store())
    outcome = await service.preload()
    if outcome.ok:
        logger.info(
            "Knowledge base ready: %d rows from %s", outcome.row_count, outcome.source
        )
    else:
        logger.warning("Knowledge base starting empty: %s", outcome.error)

    yield


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatalchemy.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
