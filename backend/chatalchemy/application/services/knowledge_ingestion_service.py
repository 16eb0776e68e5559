"""Knowledge ingestion service — loads uploaded and backend datasets into the store.

Pipeline per file: Check extension → Decode (worker thread) → Store.

Each file is all-or-nothing: a failure leaves the store untouched and is
reported as a failed IngestionOutcome, so a batch upload can partially
succeed.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence

from chatalchemy.application.interfaces.dataset_source import DatasetSource
from chatalchemy.application.interfaces.knowledge_store import KnowledgeStore
from chatalchemy.application.interfaces.row_ingestor import IngestedRows, RowIngestor
from chatalchemy.domain.entities import (
    IngestionOutcome,
    IngestionStatus,
    normalize_row,
)
from chatalchemy.domain.exceptions import (
    DecodeError,
    IngestionError,
    NoValidDataError,
    SourceUnavailableError,
)
from chatalchemy.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("KnowledgeIngestion")

SAMPLE_SOURCE_NAME = "sample_data"

# Loaded when the backend dataset cannot be read, so the chat still has data.
SAMPLE_ROWS: tuple[dict[str, str | int], ...] = (
    {"month": "January", "sales": 1000, "revenue": 50000},
    {"month": "February", "sales": 1200, "revenue": 60000},
    {"month": "March", "sales": 1500, "revenue": 75000},
)

IngestorResolver = Callable[[str], RowIngestor]


class KnowledgeIngestionService:
    """Application service that feeds the KnowledgeStore.

    Decoding runs in worker threads, so several uploads can be decoded in
    parallel; store appends are serialized by the store itself.
    """

    def __init__(
        self,
        store: KnowledgeStore,
        dataset_source: DatasetSource,
        ingestor_resolver: IngestorResolver,
        *,
        preload_file: str = "",
        use_sample_fallback: bool = True,
        max_upload_bytes: int | None = None,
        timeout_seconds: float | None = None,
    ):
        self._store = store
        self._dataset_source = dataset_source
        self._resolve_ingestor = ingestor_resolver
        self._preload_file = preload_file
        self._use_sample_fallback = use_sample_fallback
        self._max_upload_bytes = max_upload_bytes
        self._timeout = timeout_seconds

    # ── Uploads ──────────────────────────────────────────────────────

    @property
    def max_upload_bytes(self) -> int | None:
        return self._max_upload_bytes

    async def ingest_upload(self, file_name: str, payload: bytes) -> IngestionOutcome:
        """Decode one uploaded file and append its rows tagged with ``file_name``."""
        plog.step_start(PipelineStage.UPLOAD, f"Received file '{file_name}'", size_bytes=len(payload))
        try:
            if self._max_upload_bytes is not None and len(payload) > self._max_upload_bytes:
                raise IngestionError(
                    file_name,
                    f"File exceeds the upload limit of {self._max_upload_bytes} bytes",
                )
            rows = await self._decode(file_name, payload, source=file_name)
        except IngestionError as exc:
            plog.step_error(PipelineStage.ERROR, f"Skipped '{file_name}'", error=exc)
            return _failed(file_name, exc)

        self._store.add_uploaded(file_name, rows.entries)
        plog.step_complete(
            PipelineStage.STORE, f"Loaded '{file_name}'",
            rows=len(rows.entries), total_entries=self._store.count(),
        )
        return IngestionOutcome(
            file_name=file_name,
            status=IngestionStatus.LOADED,
            source=file_name,
            row_count=len(rows.entries),
            warnings=rows.warnings,
        )

    async def ingest_batch(
        self, files: Sequence[tuple[str, bytes]]
    ) -> list[IngestionOutcome]:
        """Ingest several files concurrently; each outcome is independent."""
        plog.separator(f"Batch upload: {len(files)} file(s)")
        outcomes = await asyncio.gather(
            *(self.ingest_upload(name, payload) for name, payload in files)
        )

        failed = [o for o in outcomes if not o.ok]
        if failed:
            logger.warning(
                "%d of %d file(s) could not be loaded: %s",
                len(failed),
                len(outcomes),
                "; ".join(f"{o.file_name} ({o.error})" for o in failed),
            )
        plog.step_complete(
            PipelineStage.COMPLETE, "Batch upload finished",
            loaded=len(outcomes) - len(failed), failed=len(failed),
        )
        return list(outcomes)

    # ── Backend dataset ──────────────────────────────────────────────

    async def preload(self) -> IngestionOutcome:
        """Load the reserved backend dataset once.

        Falls back to the built-in sample rows when the dataset cannot be
        loaded and the fallback is enabled.
        """
        source = self._store.preloaded_source_name
        if self._store.is_preloaded:
            return IngestionOutcome(
                file_name=self._preload_file,
                status=IngestionStatus.LOADED,
                source=source,
                row_count=sum(1 for e in self._store.entries() if e.source == source),
            )

        sample_count = sum(1 for e in self._store.entries() if e.source == SAMPLE_SOURCE_NAME)
        if sample_count:
            return IngestionOutcome(
                file_name=SAMPLE_SOURCE_NAME,
                status=IngestionStatus.LOADED,
                source=SAMPLE_SOURCE_NAME,
                row_count=sample_count,
            )

        error: IngestionError | None = None
        rows = IngestedRows()
        try:
            if not self._preload_file:
                raise SourceUnavailableError(source, "No backend dataset configured")
            with plog.timed_step(PipelineStage.PRELOAD, f"Loading backend dataset '{self._preload_file}'"):
                payload = await self._dataset_source.read(self._preload_file)
                rows = await self._decode(self._preload_file, payload, source=source)
        except IngestionError as exc:
            logger.error("Error loading backend data: %s", exc)
            error = exc

        if rows.entries:
            self._store.add_preloaded(rows.entries)
            return IngestionOutcome(
                file_name=self._preload_file,
                status=IngestionStatus.LOADED,
                source=source,
                row_count=len(rows.entries),
                warnings=rows.warnings,
            )

        if self._use_sample_fallback:
            sample = [normalize_row(row, SAMPLE_SOURCE_NAME) for row in SAMPLE_ROWS]
            self._store.add_preloaded(sample)
            plog.warning("Backend dataset unavailable — using sample data", rows=len(sample))
            return IngestionOutcome(
                file_name=SAMPLE_SOURCE_NAME,
                status=IngestionStatus.LOADED,
                source=SAMPLE_SOURCE_NAME,
                row_count=len(sample),
                warnings=[str(error)] if error else [],
            )

        return _failed(self._preload_file, error or NoValidDataError(self._preload_file))

    # ── Store management ─────────────────────────────────────────────

    def clear(self) -> int:
        """Reset to built-in data only. Returns the number of removed entries."""
        return self._store.clear()

    def loaded_files(self) -> list[str]:
        return self._store.loaded_files()

    # ── Internal ─────────────────────────────────────────────────────

    async def _decode(self, file_name: str, payload: bytes, *, source: str) -> IngestedRows:
        ingestor = self._resolve_ingestor(file_name)
        plog.step_start(PipelineStage.DECODE, f"Decoding '{file_name}'", ingestor=type(ingestor).__name__)
        try:
            rows = await asyncio.wait_for(
                asyncio.to_thread(ingestor.ingest, payload, source, file_name=file_name),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise SourceUnavailableError(
                file_name, f"Decoding timed out after {self._timeout}s"
            ) from exc
        except IngestionError:
            raise
        except Exception as exc:
            raise DecodeError(file_name, f"Could not decode file: {exc}") from exc

        plog.detail(f"Decoded '{file_name}'", rows=len(rows.entries), warnings=len(rows.warnings))
        for warning in rows.warnings[:5]:
            plog.warning(warning, file=file_name)
        if not rows.entries:
            raise NoValidDataError(file_name)
        return rows


def _failed(file_name: str, error: IngestionError) -> IngestionOutcome:
    return IngestionOutcome(
        file_name=file_name,
        status=IngestionStatus.FAILED,
        error=error.message,
        error_type=type(error).__name__,
    )
