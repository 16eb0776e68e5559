"""Query parser — extracts search hints from a free-text question.

The grammar is intentionally small and lenient:

    where <field> (=|:) <'quoted' | "quoted" | bare-token>   (repeatable, AND-ed)
    show columns|fields <name>[, <name> ...] [where ...]

Anything not recognized is ignored; the parser never rejects a query.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from chatalchemy.domain.entities import Condition, QueryDescriptor

_CONDITION_RE = re.compile(
    r"""\bwhere\s+(\w+)\s*[=:]\s*(?:'([^']*)'|"([^"]*)"|([^\s'",]+))""",
    re.IGNORECASE,
)
_COLUMNS_RE = re.compile(
    r"\bshow\s+(?:columns?|fields?)\s+(?!where\b)(.+?)(?=\s+where\b|$)",
    re.IGNORECASE | re.DOTALL,
)
_COLUMN_SPLIT_RE = re.compile(r"[,\s]+")
_TRAILING_PUNCTUATION = ".?!;"


@dataclass(frozen=True)
class QueryParserConfig:
    """Tunable vocabulary for term and intent extraction."""

    min_term_length: int = 3
    chart_triggers: tuple[str, ...] = ("graph", "chart", "plot")
    table_triggers: tuple[str, ...] = ("table", "show", "list", "display")


class QueryParser:
    """Turns raw query text into a QueryDescriptor. Pure and deterministic."""

    def __init__(self, config: QueryParserConfig | None = None):
        self._config = config or QueryParserConfig()

    @property
    def config(self) -> QueryParserConfig:
        return self._config

    def parse(self, raw_query: str) -> QueryDescriptor:
        raw_query = raw_query or ""
        lowered = raw_query.lower()
        return QueryDescriptor(
            raw_query=raw_query,
            terms=self.extract_terms(lowered),
            conditions=extract_conditions(raw_query),
            requested_columns=extract_columns(raw_query),
            wants_chart=_contains_any(lowered, self._config.chart_triggers),
            wants_table=_contains_any(lowered, self._config.table_triggers),
        )

    def extract_terms(self, text: str) -> tuple[str, ...]:
        """Lowercase whitespace tokens, short ones dropped, first-seen order kept."""
        seen: dict[str, None] = {}
        for token in text.lower().split():
            if len(token) >= self._config.min_term_length:
                seen.setdefault(token, None)
        return tuple(seen)


def extract_conditions(raw_query: str) -> tuple[Condition, ...]:
    conditions: list[Condition] = []
    for match in _CONDITION_RE.finditer(raw_query):
        field_name = match.group(1).lower()
        quoted = next((g for g in match.group(2, 3) if g is not None), None)
        if quoted is None:
            # bare token: drop sentence punctuation, e.g. "where month=Jan."
            value = match.group(4).rstrip(_TRAILING_PUNCTUATION)
        else:
            value = quoted
        value = value.strip().strip("'\"").strip()
        if value:
            conditions.append(Condition(field=field_name, value=value))
    return tuple(conditions)


def extract_columns(raw_query: str) -> tuple[str, ...]:
    match = _COLUMNS_RE.search(raw_query.strip())
    if not match:
        return ()
    return tuple(
        col.lower()
        for col in _COLUMN_SPLIT_RE.split(match.group(1).strip())
        if col
    )


def _contains_any(text: str, words: Iterable[str]) -> bool:
    return any(word.lower() in text for word in words)
