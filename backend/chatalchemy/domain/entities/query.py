"""Domain entities for knowledge base queries — parsed descriptors and projections."""

from dataclasses import dataclass, field

from .data_entry import FieldValue


@dataclass(frozen=True)
class Condition:
    """A ``field=value`` constraint parsed from a ``where`` clause."""

    field: str
    value: str

    def __str__(self) -> str:
        return f"{self.field}={self.value}"


@dataclass(frozen=True)
class QueryDescriptor:
    """Structured hints extracted from a free-text query."""

    raw_query: str
    terms: tuple[str, ...] = ()
    conditions: tuple[Condition, ...] = ()
    requested_columns: tuple[str, ...] = ()
    wants_chart: bool = False
    wants_table: bool = False


@dataclass
class ChartDataset:
    """One numeric series of a chart projection."""

    label: str
    data: list[int | float | None] = field(default_factory=list)


@dataclass
class ChartSeries:
    """Chart-ready projection of matched rows."""

    kind: str
    labels: list[str] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)


@dataclass
class TableProjection:
    """Table-ready projection of the representative source's matched rows."""

    headers: list[str]
    rows: list[list[FieldValue]]
    caption: str
    source: str


@dataclass
class KnowledgeQueryResult:
    """Outcome of running a query descriptor against the knowledge store.

    ``found_any_match`` is false when nothing matched; ``from_preloaded``
    tells the caller whether the representative match came from the
    preloaded dataset, for attribution in the downstream prompt.
    """

    text: str = ""
    found_any_match: bool = False
    from_preloaded: bool = False
    match_count: int = 0
    sources: list[str] = field(default_factory=list)
    chart: ChartSeries | None = None
    table: TableProjection | None = None
