"""Unit tests for KnowledgeIngestionService — uploads, batches, and the backend preload."""

import pytest

from chatalchemy.application.interfaces.dataset_source import DatasetSource
from chatalchemy.application.services import KnowledgeIngestionService
from chatalchemy.application.services.knowledge_ingestion_service import SAMPLE_SOURCE_NAME
from chatalchemy.domain.entities import IngestionStatus
from chatalchemy.domain.exceptions import SourceUnavailableError
from chatalchemy.infrastructure.ingestors import ingestor_for_filename
from chatalchemy.infrastructure.store.in_memory_knowledge_store import InMemoryKnowledgeStore

PRELOADED = "PharmAlchemy"
DATASET = b"Drug Name,Disease\nMetformin,Diabetes\nAspirin,Pain\n"


# ── Fakes ────────────────────────────────────────────────────────────


class FakeDatasetSource(DatasetSource):
    def __init__(self, files: dict[str, bytes] | None = None):
        self.files = files or {}
        self.reads: list[str] = []

    async def read(self, name: str) -> bytes:
        self.reads.append(name)
        if name not in self.files:
            raise SourceUnavailableError(name, f"File {name} not found or inaccessible")
        return self.files[name]


def _service(
    store: InMemoryKnowledgeStore | None = None,
    source: FakeDatasetSource | None = None,
    **kwargs,
) -> KnowledgeIngestionService:
    kwargs.setdefault("preload_file", "drugs.csv")
    return KnowledgeIngestionService(
        store if store is not None else InMemoryKnowledgeStore(PRELOADED),
        source if source is not None else FakeDatasetSource({"drugs.csv": DATASET}),
        ingestor_for_filename,
        **kwargs,
    )


# ── Uploads ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_upload_loads_rows_tagged_with_file_name():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store)

    outcome = await service.ingest_upload("sales.csv", b"month,sales\nJan,100\nFeb,120\n")

    assert outcome.ok
    assert outcome.row_count == 2
    assert outcome.source == "sales.csv"
    assert [e.source for e in store.entries()] == ["sales.csv", "sales.csv"]
    assert service.loaded_files() == ["sales.csv"]


@pytest.mark.asyncio
async def test_upload_unsupported_extension_fails_without_touching_store():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store)

    outcome = await service.ingest_upload("notes.txt", b"hello")

    assert outcome.status == IngestionStatus.FAILED
    assert outcome.error_type == "UnsupportedFormatError"
    assert "Please upload CSV or Excel files" in outcome.error
    assert store.count() == 0
    assert service.loaded_files() == []


@pytest.mark.asyncio
async def test_upload_with_no_usable_rows_fails():
    store = InMemoryKnowledgeStore(PRELOADED)

    outcome = await _service(store).ingest_upload("empty.csv", b"a,b\n,\n")

    assert outcome.error_type == "NoValidDataError"
    assert store.loaded_files() == []


@pytest.mark.asyncio
async def test_upload_with_corrupt_spreadsheet_fails():
    outcome = await _service().ingest_upload("broken.xlsx", b"not a workbook")

    assert outcome.error_type == "DecodeError"


@pytest.mark.asyncio
async def test_upload_over_size_limit_fails():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store, max_upload_bytes=10)

    outcome = await service.ingest_upload("big.csv", b"a,b\n" + b"1,2\n" * 10)

    assert not outcome.ok
    assert "upload limit" in outcome.error
    assert store.count() == 0


@pytest.mark.asyncio
async def test_upload_warnings_are_reported():
    outcome = await _service().ingest_upload("m.csv", b"a,b\n1\n2,3\n")

    assert outcome.ok
    assert outcome.row_count == 2
    assert outcome.warnings == ["Row 2: expected 2 fields, got 1"]


@pytest.mark.asyncio
async def test_reupload_duplicates_entries():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store)
    payload = b"a\n1\n2\n"

    await service.ingest_upload("a.csv", payload)
    await service.ingest_upload("a.csv", payload)

    assert store.count() == 4
    assert service.loaded_files() == ["a.csv"]


@pytest.mark.asyncio
async def test_batch_partial_success():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store)

    outcomes = await service.ingest_batch([
        ("good.csv", b"x,y\n1,2\n"),
        ("bad.pdf", b"%PDF"),
        ("empty.csv", b""),
    ])

    assert [o.file_name for o in outcomes] == ["good.csv", "bad.pdf", "empty.csv"]
    assert [o.ok for o in outcomes] == [True, False, False]
    assert outcomes[2].error_type == "DecodeError"
    assert store.count() == 1
    assert service.loaded_files() == ["good.csv"]


# ── Preload ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_preload_loads_backend_dataset_under_reserved_name():
    store = InMemoryKnowledgeStore(PRELOADED)

    outcome = await _service(store).preload()

    assert outcome.ok
    assert outcome.source == PRELOADED
    assert outcome.row_count == 2
    assert store.is_preloaded is True
    assert all(e.source == PRELOADED for e in store.entries())
    assert store.loaded_files() == []


@pytest.mark.asyncio
async def test_preload_is_idempotent():
    store = InMemoryKnowledgeStore(PRELOADED)
    source = FakeDatasetSource({"drugs.csv": DATASET})
    service = _service(store, source)

    await service.preload()
    outcome = await service.preload()

    assert outcome.row_count == 2
    assert store.count() == 2
    assert source.reads == ["drugs.csv"]


@pytest.mark.asyncio
async def test_preload_falls_back_to_sample_data():
    store = InMemoryKnowledgeStore(PRELOADED)

    outcome = await _service(store, FakeDatasetSource()).preload()

    assert outcome.ok
    assert outcome.source == SAMPLE_SOURCE_NAME
    assert outcome.row_count == 3
    assert "not found" in outcome.warnings[0]
    assert store.is_preloaded is False
    assert [e.fields["month"] for e in store.entries()] == ["January", "February", "March"]


@pytest.mark.asyncio
async def test_sample_fallback_survives_clear_and_is_not_reloaded():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store, FakeDatasetSource())
    await service.preload()
    await service.ingest_upload("u.csv", b"a\n1\n")

    removed = service.clear()
    await service.preload()

    assert removed == 1
    assert store.count() == 3


@pytest.mark.asyncio
async def test_preload_without_fallback_reports_failure():
    store = InMemoryKnowledgeStore(PRELOADED)

    outcome = await _service(store, FakeDatasetSource(), use_sample_fallback=False).preload()

    assert outcome.status == IngestionStatus.FAILED
    assert outcome.error_type == "SourceUnavailableError"
    assert store.count() == 0


@pytest.mark.asyncio
async def test_preload_with_unreadable_dataset_falls_back():
    store = InMemoryKnowledgeStore(PRELOADED)
    source = FakeDatasetSource({"drugs.csv": b""})

    outcome = await _service(store, source).preload()

    assert outcome.source == SAMPLE_SOURCE_NAME
    assert store.is_preloaded is False


@pytest.mark.asyncio
async def test_clear_keeps_preloaded_dataset():
    store = InMemoryKnowledgeStore(PRELOADED)
    service = _service(store)
    await service.preload()
    await service.ingest_batch([("a.csv", b"x\n1\n2\n"), ("b.csv", b"y\n3\n")])

    removed = service.clear()

    assert removed == 3
    assert store.count() == 2
    assert service.loaded_files() == []
    assert store.is_preloaded is True
