"""Abstract interface (port) for decoding tabular files into entries."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from chatalchemy.domain.entities import DataEntry


@dataclass
class IngestedRows:
    """Result of a one-shot decode: usable entries plus non-fatal parse warnings."""

    entries: list[DataEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def dedupe_header(header: Sequence[str]) -> tuple[list[str], list[str]]:
    """Rename repeated column names to ``name_1``, ``name_2``, ...

    The first occurrence keeps its name; blank names are left alone (they
    are dropped later). Returns the new header and one warning per rename.
    """
    taken = {name for name in header if name}
    seen: set[str] = set()
    columns: list[str] = []
    warnings: list[str] = []
    for name in header:
        if not name or name not in seen:
            seen.add(name)
            columns.append(name)
            continue
        suffix = 1
        while f"{name}_{suffix}" in taken:
            suffix += 1
        renamed = f"{name}_{suffix}"
        taken.add(renamed)
        seen.add(renamed)
        columns.append(renamed)
        warnings.append(f"Duplicate column '{name}' renamed to '{renamed}'")
    return columns, warnings


class RowIngestor(ABC):
    """Port for format-specific readers — implemented in the infrastructure layer."""

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def ingest(self, payload: bytes, source: str, *, file_name: str = "") -> IngestedRows:
        """Decode ``payload`` and tag every entry with ``source``.

        Raises:
            DecodeError: If the payload is not a readable file of this format.
        """
        ...

    def supports(self, file_name: str) -> bool:
        return file_name.lower().endswith(self.extensions)
