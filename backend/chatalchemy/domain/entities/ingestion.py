"""Domain entities describing the outcome of ingesting a single file."""

from dataclasses import dataclass, field
from enum import Enum


class IngestionStatus(str, Enum):
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class IngestionOutcome:
    """Per-file result of an upload or preload."""

    file_name: str
    status: IngestionStatus
    source: str = ""
    row_count: int = 0
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is IngestionStatus.LOADED
