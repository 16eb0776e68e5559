from .data_entry import (
    CONTENT_DELIMITER,
    INTERNAL_KEYS,
    DataEntry,
    FieldValue,
    is_blank_row,
    normalize_row,
)
from .query import (
    ChartDataset,
    ChartSeries,
    Condition,
    KnowledgeQueryResult,
    QueryDescriptor,
    TableProjection,
)
from .chat_message import ChatAnswer, ChatCompletionResult, ChatMessage, TokenUsage
from .ingestion import IngestionOutcome, IngestionStatus

__all__ = [
    "CONTENT_DELIMITER",
    "INTERNAL_KEYS",
    "DataEntry",
    "FieldValue",
    "is_blank_row",
    "normalize_row",
    "ChartDataset",
    "ChartSeries",
    "Condition",
    "KnowledgeQueryResult",
    "QueryDescriptor",
    "TableProjection",
    "ChatAnswer",
    "ChatCompletionResult",
    "ChatMessage",
    "TokenUsage",
    "IngestionOutcome",
    "IngestionStatus",
]
