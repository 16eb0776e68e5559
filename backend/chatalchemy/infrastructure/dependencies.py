"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator
from functools import lru_cache

from chatalchemy.config import get_settings
from chatalchemy.application.interfaces.knowledge_store import KnowledgeStore
from chatalchemy.application.services import (
    KnowledgeChatService,
    KnowledgeIngestionService,
    KnowledgeQueryEngine,
    ProjectionConfig,
    QueryParser,
    QueryParserConfig,
)
from chatalchemy.infrastructure.ingestors import ingestor_for_filename
from chatalchemy.infrastructure.openrouter import OpenRouterClient
from chatalchemy.infrastructure.storage.local_dataset_source import LocalDatasetSource
from chatalchemy.infrastructure.store.in_memory_knowledge_store import InMemoryKnowledgeStore


@lru_cache
def get_knowledge_store() -> KnowledgeStore:
    """Process-wide knowledge store — one per application instance."""
    settings = get_settings()
    return InMemoryKnowledgeStore(preloaded_source_name=settings.preloaded_source_name)


def build_query_engine(store: KnowledgeStore) -> KnowledgeQueryEngine:
    """Query engine configured from settings."""
    settings = get_settings()
    parser = QueryParser(
        QueryParserConfig(
            min_term_length=settings.min_term_length,
            chart_triggers=tuple(settings.chart_triggers),
            table_triggers=tuple(settings.table_triggers),
        )
    )
    return KnowledgeQueryEngine(
        store,
        parser=parser,
        config=ProjectionConfig(label_fields=tuple(settings.chart_label_fields)),
    )


def build_ingestion_service(store: KnowledgeStore) -> KnowledgeIngestionService:
    settings = get_settings()
    return KnowledgeIngestionService(
        store=store,
        dataset_source=LocalDatasetSource(data_dir=settings.data_dir),
        ingestor_resolver=ingestor_for_filename,
        preload_file=settings.preload_file,
        use_sample_fallback=settings.use_sample_fallback,
        max_upload_bytes=settings.max_upload_size_mb * 1024 * 1024,
        timeout_seconds=settings.ingest_timeout_seconds,
    )


async def get_ingestion_service() -> AsyncGenerator[KnowledgeIngestionService, None]:
    """Provides a KnowledgeIngestionService bound to the shared store."""
    yield build_ingestion_service(get_knowledge_store())


async def get_query_engine() -> AsyncGenerator[KnowledgeQueryEngine, None]:
    """Provides a KnowledgeQueryEngine bound to the shared store."""
    yield build_query_engine(get_knowledge_store())


async def get_knowledge_chat_service() -> AsyncGenerator[KnowledgeChatService, None]:
    """Provides a KnowledgeChatService with OpenRouter as the provider."""
    settings = get_settings()
    provider = OpenRouterClient(
        api_key=settings.openrouter_api_key.strip(),
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
    )
    yield KnowledgeChatService(
        provider=provider,
        engine=build_query_engine(get_knowledge_store()),
        model=settings.chat_model,
        dataset_name=settings.preloaded_source_name,
        assistant_name=settings.assistant_name,
        temperature=settings.chat_temperature,
        history_window=settings.history_window,
    )
