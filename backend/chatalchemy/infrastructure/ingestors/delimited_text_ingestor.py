"""Delimited-text ingestor — decodes CSV bytes into knowledge entries."""

import csv
import io
import logging

from chatalchemy.application.interfaces.row_ingestor import IngestedRows, RowIngestor, dedupe_header
from chatalchemy.domain.entities import is_blank_row, normalize_row
from chatalchemy.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)


class DelimitedTextIngestor(RowIngestor):
    """Reads a header row plus data rows from comma-delimited text.

    Rows whose field count does not match the header are aligned by
    position: short rows are padded with None, extra cells are dropped.
    Each mismatch is reported as a warning, never as a failure.
    """

    extensions = (".csv",)

    def __init__(self, delimiter: str = ","):
        self._delimiter = delimiter

    def ingest(self, payload: bytes, source: str, *, file_name: str = "") -> IngestedRows:
        name = file_name or source
        text = self._decode(payload)
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self._delimiter)

        try:
            header = self._read_header(reader)
        except csv.Error as exc:
            raise DecodeError(name, f"Unreadable header row: {exc}") from exc
        if header is None:
            raise DecodeError(name, "No header row found")
        header, header_warnings = dedupe_header(header)

        result = IngestedRows(warnings=header_warnings)
        while True:
            try:
                cells = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                result.warnings.append(f"Row {reader.line_num}: {exc}")
                continue

            if not any(cell.strip() for cell in cells):
                continue
            if len(cells) != len(header):
                result.warnings.append(
                    f"Row {reader.line_num}: expected {len(header)} fields, got {len(cells)}"
                )

            row = {
                column: (cells[index] if index < len(cells) else None)
                for index, column in enumerate(header)
                if column
            }
            if is_blank_row(row):
                continue
            result.entries.append(normalize_row(row, source))

        if result.warnings:
            logger.warning(
                "CSV parsing warnings for %s: %d issue(s); first: %s",
                name,
                len(result.warnings),
                result.warnings[0],
            )
        return result

    @staticmethod
    def _decode(payload: bytes) -> str:
        # Try UTF-8 (with or without BOM) first, then fall back to latin-1
        try:
            return payload.decode("utf-8-sig")
        except UnicodeDecodeError:
            return payload.decode("latin-1")

    @staticmethod
    def _read_header(reader) -> list[str] | None:
        """Return the first non-blank row, trimmed, or None for empty input."""
        for cells in reader:
            if any(cell.strip() for cell in cells):
                return [cell.strip() for cell in cells]
        return None
