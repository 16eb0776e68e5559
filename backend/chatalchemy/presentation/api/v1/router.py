"""V1 API router — mounts health, chat, and knowledge endpoints under /api/v1."""

from fastapi import APIRouter

from chatalchemy.presentation.api.v1.endpoints.health import router as health_router
from chatalchemy.presentation.api.v1.endpoints.chat import router as chat_router
from chatalchemy.presentation.api.v1.knowledge_controller import router as knowledge_router

router = APIRouter(prefix="/api/v1")
router.include_router(health_router)
router.include_router(chat_router)
router.include_router(knowledge_router)
