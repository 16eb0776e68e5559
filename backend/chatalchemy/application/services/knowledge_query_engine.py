"""Knowledge query engine — filters the store and shapes the matched rows.

Flow for one query:
  1. Keep entries whose content contains any term (OR) and whose fields
     satisfy every ``where`` condition (AND).
  2. Group the matches by source, in discovery order.
  3. Render a plain-text summary and, when asked for, a chart series and a
     table projection.

The engine never raises for a parsed query: projections it cannot build
are simply omitted.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from chatalchemy.application.interfaces.knowledge_store import KnowledgeStore
from chatalchemy.application.services.query_parser import QueryParser
from chatalchemy.domain.entities import (
    ChartDataset,
    ChartSeries,
    Condition,
    DataEntry,
    FieldValue,
    KnowledgeQueryResult,
    QueryDescriptor,
    TableProjection,
)
from chatalchemy.domain.entities.data_entry import is_empty_value, render_value

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class ProjectionConfig:
    """Defaults for chart and table projections."""

    chart_kind: str = "line"
    label_fields: tuple[str, ...] = ("month", "Product Name", "Date", "date", "year")
    missing_marker: str = NOT_AVAILABLE


class KnowledgeQueryEngine:
    """Runs query descriptors against a KnowledgeStore."""

    def __init__(
        self,
        store: KnowledgeStore,
        parser: QueryParser | None = None,
        config: ProjectionConfig | None = None,
    ):
        self._store = store
        self._parser = parser or QueryParser()
        self._config = config or ProjectionConfig()

    def search(self, raw_query: str) -> KnowledgeQueryResult:
        """Parse ``raw_query`` and run it."""
        return self.query(self._parser.parse(raw_query))

    def query(self, descriptor: QueryDescriptor) -> KnowledgeQueryResult:
        candidates = self._filter(self._store.entries(), descriptor)
        logger.info(
            "Knowledge query: terms=%d conditions=%s matches=%d",
            len(descriptor.terms),
            [str(c) for c in descriptor.conditions],
            len(candidates),
        )
        if not candidates:
            return KnowledgeQueryResult()

        groups = _group_by_source(candidates)
        representative = candidates[0]

        chart = self._build_chart(candidates) if descriptor.wants_chart else None
        table = (
            self._build_table(groups[representative.source], descriptor)
            if descriptor.wants_table
            else None
        )

        return KnowledgeQueryResult(
            text=_render_text(groups),
            found_any_match=True,
            from_preloaded=(
                self._store.is_preloaded
                and representative.source == self._store.preloaded_source_name
            ),
            match_count=len(candidates),
            sources=list(groups),
            chart=chart,
            table=table,
        )

    # ── Filtering ────────────────────────────────────────────────────

    @staticmethod
    def _filter(
        entries: Sequence[DataEntry], descriptor: QueryDescriptor
    ) -> list[DataEntry]:
        if not descriptor.terms:
            return []
        return [
            entry
            for entry in entries
            if _matches_terms(entry, descriptor.terms)
            and all(_satisfies(entry, c) for c in descriptor.conditions)
        ]

    # ── Projections ──────────────────────────────────────────────────

    def _build_chart(self, candidates: list[DataEntry]) -> ChartSeries | None:
        value_field = next(
            (key for key, value in candidates[0].visible_items() if to_number(value) is not None),
            None,
        )
        if value_field is None:
            logger.debug("Chart requested but no numeric column in first match")
            return None

        labels = [self._label_for(entry, index) for index, entry in enumerate(candidates)]
        data = [to_number(entry.get(value_field)) for entry in candidates]
        return ChartSeries(
            kind=self._config.chart_kind,
            labels=labels,
            datasets=[ChartDataset(label=value_field, data=data)],
        )

    def _label_for(self, entry: DataEntry, index: int) -> str:
        for name in self._config.label_fields:
            value = entry.get(name)
            if not is_empty_value(value):
                return render_value(value)
        return f"Item {index + 1}"

    def _build_table(
        self, group: list[DataEntry], descriptor: QueryDescriptor
    ) -> TableProjection:
        headers = group[0].visible_keys()
        if descriptor.requested_columns:
            wanted = set(descriptor.requested_columns)
            headers = [h for h in headers if h.lower() in wanted]

        rows: list[list[FieldValue]] = [
            [self._cell(entry, header) for header in headers] for entry in group
        ]

        caption = f"Found {len(group)} matching records"
        if descriptor.conditions:
            caption += " with " + ", ".join(str(c) for c in descriptor.conditions)

        return TableProjection(
            headers=headers,
            rows=rows,
            caption=caption,
            source=group[0].source,
        )

    def _cell(self, entry: DataEntry, header: str) -> FieldValue:
        value = entry.fields.get(header)
        return self._config.missing_marker if is_empty_value(value) else value


def to_number(value: FieldValue) -> int | float | None:
    """Numeric reading of a field value; None when it is not a finite number."""
    if is_empty_value(value):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _matches_terms(entry: DataEntry, terms: Sequence[str]) -> bool:
    content = entry.content.lower()
    return any(term in content for term in terms)


def _satisfies(entry: DataEntry, condition: Condition) -> bool:
    actual = render_value(entry.get(condition.field)).lower()
    return condition.value.lower() in actual


def _group_by_source(entries: list[DataEntry]) -> dict[str, list[DataEntry]]:
    groups: dict[str, list[DataEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.source, []).append(entry)
    return groups


def _render_entry(entry: DataEntry) -> str:
    return "\n".join(f"{key}: {render_value(value)}" for key, value in entry.visible_items())


def _render_text(groups: dict[str, list[DataEntry]]) -> str:
    """Flat rendering for one source; ``Data from <source>:`` blocks otherwise."""
    if len(groups) == 1:
        (entries,) = groups.values()
        return "\n\n".join(_render_entry(e) for e in entries)
    return "\n\n".join(
        f"Data from {source}:\n" + "\n\n".join(_render_entry(e) for e in entries)
        for source, entries in groups.items()
    )
