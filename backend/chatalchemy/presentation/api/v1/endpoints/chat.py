"""Knowledge chat endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from chatalchemy.application.schemas import ChatRequest, ChatResponse
from chatalchemy.application.services import KnowledgeChatService
from chatalchemy.domain.exceptions import ChatProviderError
from chatalchemy.infrastructure.dependencies import get_knowledge_chat_service

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    service: KnowledgeChatService = Depends(get_knowledge_chat_service),
) -> ChatResponse:
    """Answer a question using knowledge-base matches and the LLM.

    The response carries chart and table payloads when the question asked
    for them and matching rows were found.
    """
    try:
        answer = await service.answer(
            request.message,
            history=[m.to_domain() for m in request.history],
        )
    except ChatProviderError as e:
        raise HTTPException(
            status_code=e.status_code if 400 <= e.status_code < 600 else 502,
            detail=f"[{e.provider}] {e.message}",
        )

    return ChatResponse.from_domain(answer)
