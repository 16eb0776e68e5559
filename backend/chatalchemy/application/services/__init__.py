from .query_parser import QueryParser, QueryParserConfig
from .knowledge_query_engine import KnowledgeQueryEngine, ProjectionConfig
from .knowledge_ingestion_service import KnowledgeIngestionService
from .knowledge_chat_service import KnowledgeChatService

__all__ = [
    "QueryParser",
    "QueryParserConfig",
    "KnowledgeQueryEngine",
    "ProjectionConfig",
    "KnowledgeIngestionService",
    "KnowledgeChatService",
]
