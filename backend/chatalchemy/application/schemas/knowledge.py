"""Pydantic v2 schemas (DTOs) for knowledge-base endpoints."""

from pydantic import BaseModel, Field

from chatalchemy.domain.entities import (
    ChartSeries,
    IngestionOutcome,
    KnowledgeQueryResult,
    TableProjection,
)


# ── Request Schemas ──────────────────────────────────────────────────


class KnowledgeSearchRequest(BaseModel):
    """Request body for a free-text knowledge search."""

    query: str = Field(..., description="Free-text query, e.g. 'show table sales where month=Jan'")


# ── Response Schemas ─────────────────────────────────────────────────


class ChartDatasetSchema(BaseModel):
    label: str
    data: list[int | float | None] = []


class ChartSeriesSchema(BaseModel):
    """Chart-ready series for a front-end chart widget."""

    kind: str
    labels: list[str] = []
    datasets: list[ChartDatasetSchema] = []

    @classmethod
    def from_domain(cls, chart: ChartSeries | None) -> "ChartSeriesSchema | None":
        if chart is None:
            return None
        return cls(
            kind=chart.kind,
            labels=chart.labels,
            datasets=[ChartDatasetSchema(label=d.label, data=d.data) for d in chart.datasets],
        )


class TableProjectionSchema(BaseModel):
    headers: list[str]
    rows: list[list[str | int | float | None]]
    caption: str
    source: str

    @classmethod
    def from_domain(cls, table: TableProjection | None) -> "TableProjectionSchema | None":
        if table is None:
            return None
        return cls(
            headers=table.headers,
            rows=table.rows,
            caption=table.caption,
            source=table.source,
        )


class KnowledgeSearchResponse(BaseModel):
    text: str = ""
    found_any_match: bool = False
    from_preloaded: bool = False
    match_count: int = 0
    sources: list[str] = []
    chart: ChartSeriesSchema | None = None
    table: TableProjectionSchema | None = None

    @classmethod
    def from_domain(cls, result: KnowledgeQueryResult) -> "KnowledgeSearchResponse":
        return cls(
            text=result.text,
            found_any_match=result.found_any_match,
            from_preloaded=result.from_preloaded,
            match_count=result.match_count,
            sources=result.sources,
            chart=ChartSeriesSchema.from_domain(result.chart),
            table=TableProjectionSchema.from_domain(result.table),
        )


class IngestionOutcomeSchema(BaseModel):
    """Per-file result of an upload."""

    file_name: str
    status: str
    source: str = ""
    row_count: int = 0
    warnings: list[str] = []
    error: str | None = None
    error_type: str | None = None

    @classmethod
    def from_domain(cls, outcome: IngestionOutcome) -> "IngestionOutcomeSchema":
        return cls(
            file_name=outcome.file_name,
            status=outcome.status.value,
            source=outcome.source,
            row_count=outcome.row_count,
            warnings=outcome.warnings,
            error=outcome.error,
            error_type=outcome.error_type,
        )


class UploadResultSchema(BaseModel):
    outcomes: list[IngestionOutcomeSchema] = []
    loaded_count: int = 0
    failed_count: int = 0
    loaded_files: list[str] = []


class LoadedFilesResponse(BaseModel):
    files: list[str] = []
    count: int = 0


class ClearResponse(BaseModel):
    removed_entries: int = 0
    remaining_entries: int = 0


class KnowledgeStatusResponse(BaseModel):
    entry_count: int = 0
    preloaded: bool = False
    preloaded_source_name: str
    loaded_files: list[str] = []
