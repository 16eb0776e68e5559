"""Pydantic v2 schemas (DTOs) for the knowledge chat endpoint."""

from pydantic import BaseModel, Field

from chatalchemy.domain.entities import ChatAnswer, ChatMessage

from .knowledge import ChartSeriesSchema, TableProjectionSchema


class ChatMessageSchema(BaseModel):
    """A previous turn of the conversation."""

    role: str = Field(..., pattern=r"^(user|assistant)$")
    content: str

    def to_domain(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    """Request schema for the chat endpoint."""

    message: str = Field(..., min_length=1, description="The user's question")
    history: list[ChatMessageSchema] = Field(
        default_factory=list, description="Earlier turns, oldest first"
    )


class TokenUsageResponse(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float | None = None


class ChatResponse(BaseModel):
    """Assistant reply plus the knowledge projections behind it."""

    content: str
    model: str = ""
    from_preloaded: bool = False
    found_in_knowledge_base: bool = False
    chart: ChartSeriesSchema | None = None
    table: TableProjectionSchema | None = None
    usage: TokenUsageResponse = Field(default_factory=TokenUsageResponse)

    @classmethod
    def from_domain(cls, answer: ChatAnswer) -> "ChatResponse":
        return cls(
            content=answer.content,
            model=answer.model,
            from_preloaded=answer.from_preloaded,
            found_in_knowledge_base=answer.found_in_knowledge_base,
            chart=ChartSeriesSchema.from_domain(answer.chart),
            table=TableProjectionSchema.from_domain(answer.table),
            usage=TokenUsageResponse(
                prompt_tokens=answer.usage.prompt_tokens,
                completion_tokens=answer.usage.completion_tokens,
                total_tokens=answer.usage.total_tokens,
                cost=answer.usage.cost,
            ),
        )
