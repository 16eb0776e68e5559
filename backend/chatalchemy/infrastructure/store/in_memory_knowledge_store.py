"""In-memory knowledge store — lives for the lifetime of the process."""

import logging
import threading
from collections.abc import Sequence

from chatalchemy.application.interfaces.knowledge_store import KnowledgeStore
from chatalchemy.domain.entities import DataEntry

logger = logging.getLogger(__name__)


class InMemoryKnowledgeStore(KnowledgeStore):
    """Lock-guarded, append-only entry list.

    Readers receive tuple snapshots, so a query never observes a
    half-applied append or clear. Sources added through ``add_preloaded``
    (the reserved dataset or the sample fallback) are built-in and survive
    ``clear()``.
    """

    def __init__(self, preloaded_source_name: str):
        self._preloaded_source_name = preloaded_source_name
        self._entries: list[DataEntry] = []
        self._uploaded_files: list[str] = []
        self._preloaded = False
        self._builtin_sources: set[str] = {preloaded_source_name}
        self._lock = threading.Lock()

    @property
    def preloaded_source_name(self) -> str:
        return self._preloaded_source_name

    @property
    def is_preloaded(self) -> bool:
        return self._preloaded

    def entries(self) -> tuple[DataEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def add_uploaded(self, file_name: str, entries: Sequence[DataEntry]) -> None:
        with self._lock:
            self._entries.extend(entries)
            if file_name not in self._uploaded_files:
                self._uploaded_files.append(file_name)
            total = len(self._entries)
        logger.debug("Appended %d entries from %s (total=%d)", len(entries), file_name, total)

    def add_preloaded(self, entries: Sequence[DataEntry]) -> None:
        with self._lock:
            self._entries.extend(entries)
            self._builtin_sources.update(e.source for e in entries)
            if any(e.source == self._preloaded_source_name for e in entries):
                self._preloaded = True

    def clear(self) -> int:
        with self._lock:
            kept = [e for e in self._entries if e.source in self._builtin_sources]
            removed = len(self._entries) - len(kept)
            self._entries = kept
            self._uploaded_files = []
        logger.info("Cleared %d uploaded entries; %d built-in entries kept", removed, len(kept))
        return removed

    def loaded_files(self) -> list[str]:
        with self._lock:
            return list(self._uploaded_files)
