from .chat_provider import ChatProvider
from .dataset_source import DatasetSource
from .knowledge_store import KnowledgeStore
from .row_ingestor import IngestedRows, RowIngestor

__all__ = [
    "ChatProvider",
    "DatasetSource",
    "KnowledgeStore",
    "IngestedRows",
    "RowIngestor",
]
