from .knowledge import (
    ChartDatasetSchema,
    ChartSeriesSchema,
    ClearResponse,
    IngestionOutcomeSchema,
    KnowledgeSearchRequest,
    KnowledgeSearchResponse,
    KnowledgeStatusResponse,
    LoadedFilesResponse,
    TableProjectionSchema,
    UploadResultSchema,
)
from .chat import ChatMessageSchema, ChatRequest, ChatResponse, TokenUsageResponse

__all__ = [
    "ChartDatasetSchema",
    "ChartSeriesSchema",
    "ClearResponse",
    "IngestionOutcomeSchema",
    "KnowledgeSearchRequest",
    "KnowledgeSearchResponse",
    "KnowledgeStatusResponse",
    "LoadedFilesResponse",
    "TableProjectionSchema",
    "UploadResultSchema",
    "ChatMessageSchema",
    "ChatRequest",
    "ChatResponse",
    "TokenUsageResponse",
]
