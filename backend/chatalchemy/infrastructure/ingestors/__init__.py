"""Format-specific row ingestors."""

from pathlib import Path

from chatalchemy.application.interfaces.row_ingestor import RowIngestor
from chatalchemy.domain.exceptions import UnsupportedFormatError

from .delimited_text_ingestor import DelimitedTextIngestor
from .spreadsheet_ingestor import SpreadsheetIngestor

_INGESTORS: tuple[RowIngestor, ...] = (DelimitedTextIngestor(), SpreadsheetIngestor())

SUPPORTED_EXTENSIONS = tuple(ext for ingestor in _INGESTORS for ext in ingestor.extensions)


def ingestor_for_filename(file_name: str) -> RowIngestor:
    """Pick the ingestor for a file name, rejecting unknown extensions up front."""
    for ingestor in _INGESTORS:
        if ingestor.supports(file_name):
            return ingestor
    raise UnsupportedFormatError(file_name, Path(file_name).suffix.lower())


__all__ = [
    "DelimitedTextIngestor",
    "SpreadsheetIngestor",
    "SUPPORTED_EXTENSIONS",
    "ingestor_for_filename",
]
