"""Abstract interface (port) for the in-session knowledge store."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from chatalchemy.domain.entities import DataEntry


class KnowledgeStore(ABC):
    """Append-only collection of DataEntry with upload bookkeeping.

    Entries added through ``add_preloaded`` survive ``clear()``.
    """

    @property
    @abstractmethod
    def preloaded_source_name(self) -> str:
        ...

    @property
    @abstractmethod
    def is_preloaded(self) -> bool:
        """True once the backend dataset has been loaded."""
        ...

    @abstractmethod
    def entries(self) -> tuple[DataEntry, ...]:
        """Immutable snapshot of all entries in insertion order."""
        ...

    @abstractmethod
    def add_uploaded(self, file_name: str, entries: Sequence[DataEntry]) -> None:
        """Append entries from a user upload and record its file name."""
        ...

    @abstractmethod
    def add_preloaded(self, entries: Sequence[DataEntry]) -> None:
        """Append built-in entries; marks the store preloaded when they carry
        ``preloaded_source_name``."""
        ...

    @abstractmethod
    def clear(self) -> int:
        """Drop everything except preloaded entries. Returns removed count."""
        ...

    @abstractmethod
    def loaded_files(self) -> list[str]:
        """Uploaded file names, in upload order (excludes the preloaded dataset)."""
        ...

    def count(self) -> int:
        return len(self.entries())
