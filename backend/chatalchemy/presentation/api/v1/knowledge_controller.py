"""Knowledge API controller — upload, list, clear, and search the knowledge base."""

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from chatalchemy.application.schemas.knowledge import (
    ClearResponse,
    IngestionOutcomeSchema,
    KnowledgeSearchRequest,
    KnowledgeSearchResponse,
    KnowledgeStatusResponse,
    LoadedFilesResponse,
    UploadResultSchema,
)
from chatalchemy.application.services import KnowledgeIngestionService, KnowledgeQueryEngine
from chatalchemy.infrastructure.dependencies import (
    get_ingestion_service,
    get_knowledge_store,
    get_query_engine,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/knowledge", tags=["knowledge"])


@router.get("/status", response_model=KnowledgeStatusResponse)
async def knowledge_status():
    """Entry count, preload state, and uploaded files."""
    store = get_knowledge_store()
    return KnowledgeStatusResponse(
        entry_count=store.count(),
        preloaded=store.is_preloaded,
        preloaded_source_name=store.preloaded_source_name,
        loaded_files=store.loaded_files(),
    )


@router.get("/files", response_model=LoadedFilesResponse)
async def list_loaded_files(
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """User-uploaded file names (the preloaded dataset is not listed)."""
    files = service.loaded_files()
    return LoadedFilesResponse(files=files, count=len(files))


@router.post("/files", response_model=UploadResultSchema)
async def upload_files(
    files: list[UploadFile],
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """Upload one or more CSV/Excel files into the knowledge base."""
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files provided")

    # At most limit + 1 bytes per file; the service rejects anything longer
    limit = service.max_upload_bytes
    payloads: list[tuple[str, bytes]] = []
    for upload_file in files:
        content = await (upload_file.read(limit + 1) if limit is not None else upload_file.read())
        payloads.append((upload_file.filename or "unnamed", content))

    outcomes = await service.ingest_batch(payloads)
    loaded = sum(1 for o in outcomes if o.ok)

    return UploadResultSchema(
        outcomes=[IngestionOutcomeSchema.from_domain(o) for o in outcomes],
        loaded_count=loaded,
        failed_count=len(outcomes) - loaded,
        loaded_files=service.loaded_files(),
    )


@router.delete("/files", response_model=ClearResponse)
async def clear_uploaded_files(
    service: KnowledgeIngestionService = Depends(get_ingestion_service),
):
    """Remove uploaded data, keeping the preloaded dataset."""
    removed = service.clear()
    return ClearResponse(
        removed_entries=removed,
        remaining_entries=get_knowledge_store().count(),
    )


@router.post("/search", response_model=KnowledgeSearchResponse)
async def search_knowledge(
    request: KnowledgeSearchRequest,
    engine: KnowledgeQueryEngine = Depends(get_query_engine),
):
    """Run a free-text query against the knowledge base."""
    result = engine.search(request.query)
    return KnowledgeSearchResponse.from_domain(result)
