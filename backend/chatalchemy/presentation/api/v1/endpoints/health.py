"""Health check endpoint — reports app version and knowledge base readiness."""

from fastapi import APIRouter

from chatalchemy.config import get_settings
from chatalchemy.infrastructure.dependencies import get_knowledge_store

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Always 200; ``knowledge_entries`` is 0 until data is loaded."""
    settings = get_settings()
    store = get_knowledge_store()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "knowledge_entries": store.count(),
        "preloaded": store.is_preloaded,
    }
