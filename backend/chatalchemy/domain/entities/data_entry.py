"""Domain entity for one ingested spreadsheet row."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

FieldValue = str | int | float | None

CONTENT_DELIMITER = " | "
INTERNAL_KEYS = frozenset({"content", "source"})


def is_empty_value(value: Any) -> bool:
    """True for None and the empty string; whitespace counts as a value."""
    return value is None or value == ""


def render_value(value: FieldValue) -> str:
    """Render a field value the way it appears in content and summaries."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_content(fields: Mapping[str, FieldValue]) -> str:
    """Join non-empty fields as ``key: value`` pairs in iteration order."""
    return CONTENT_DELIMITER.join(
        f"{key}: {render_value(value)}"
        for key, value in fields.items()
        if not is_empty_value(value)
    )


@dataclass(frozen=True)
class DataEntry:
    """One normalized row from an ingested file.

    ``content`` is derived from ``fields`` at construction time and is the
    only text searched by the query engine.
    """

    fields: Mapping[str, FieldValue]
    source: str
    content: str = field(init=False)

    def __post_init__(self) -> None:
        frozen = MappingProxyType(dict(self.fields))
        object.__setattr__(self, "fields", frozen)
        object.__setattr__(self, "content", build_content(frozen))

    def get(self, name: str) -> FieldValue:
        """Case-insensitive field lookup; missing fields return None."""
        if name in self.fields:
            return self.fields[name]
        lowered = name.lower()
        for key, value in self.fields.items():
            if key.lower() == lowered:
                return value
        return None

    def visible_items(self) -> Iterator[tuple[str, FieldValue]]:
        """Fields excluding ingestion-internal keys."""
        for key, value in self.fields.items():
            if key not in INTERNAL_KEYS:
                yield key, value

    def visible_keys(self) -> list[str]:
        return [key for key, _ in self.visible_items()]


def is_blank_row(row: Mapping[str, Any]) -> bool:
    """True when every value in the row is empty."""
    return all(is_empty_value(value) for value in row.values())


def normalize_row(raw_row: Any, source: str) -> DataEntry:
    """Turn one parsed row into a DataEntry.

    Keys are whitespace-trimmed; empty values stay in ``fields`` but are left
    out of ``content``. Anything that is not a mapping yields an empty entry.
    """
    if not isinstance(raw_row, Mapping):
        return DataEntry(fields={}, source=source)

    fields: dict[str, FieldValue] = {}
    for key, value in raw_row.items():
        if key is None:
            continue
        name = str(key).strip()
        if not name:
            continue
        fields[name] = _to_field_value(value)
    return DataEntry(fields=fields, source=source)


def _to_field_value(value: Any) -> FieldValue:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
