"""Spreadsheet ingestor — decodes the first sheet of an XLSX/XLS workbook.

The container is detected from the payload's magic bytes rather than the
file extension:
- ZIP (Office Open XML): openpyxl
- OLE2 compound document (BIFF .xls): xlrd
"""

import io
import logging
import zipfile
from collections.abc import Iterable, Sequence
from typing import Any

from chatalchemy.application.interfaces.row_ingestor import IngestedRows, RowIngestor, dedupe_header
from chatalchemy.domain.entities import is_blank_row, normalize_row
from chatalchemy.domain.exceptions import DecodeError

logger = logging.getLogger(__name__)

_ZIP_MAGIC = b"PK\x03\x04"
_OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class SpreadsheetIngestor(RowIngestor):
    """Reads the first worksheet, using its first non-blank row as the header."""

    extensions = (".xlsx", ".xls")

    def ingest(self, payload: bytes, source: str, *, file_name: str = "") -> IngestedRows:
        name = file_name or source

        if payload.startswith(_ZIP_MAGIC):
            rows = self._read_xlsx(payload, name)
        elif payload.startswith(_OLE2_MAGIC):
            rows = self._read_xls(payload, name)
        else:
            raise DecodeError(name, "Not a recognized spreadsheet container")

        return self._rows_to_entries(rows, source, name)

    # ── Format-specific readers ──────────────────────────────────────

    @staticmethod
    def _read_xlsx(payload: bytes, name: str) -> list[tuple[Any, ...]]:
        """Read the first sheet with openpyxl."""
        from openpyxl import load_workbook
        from openpyxl.utils.exceptions import InvalidFileException

        try:
            wb = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError, OSError) as exc:
            raise DecodeError(name, f"Error processing Excel file: {exc}") from exc

        try:
            if not wb.worksheets:
                raise DecodeError(name, "Workbook has no sheets")
            ws = wb.worksheets[0]
            return list(ws.iter_rows(values_only=True))
        finally:
            wb.close()

    @staticmethod
    def _read_xls(payload: bytes, name: str) -> list[tuple[Any, ...]]:
        """Read the first sheet of a legacy BIFF workbook with xlrd."""
        import xlrd

        # xlrd has no single error type for a corrupt compound document
        try:
            book = xlrd.open_workbook(file_contents=payload, on_demand=True)
        except Exception as exc:
            raise DecodeError(name, f"Error processing Excel file: {exc}") from exc

        try:
            if book.nsheets == 0:
                raise DecodeError(name, "Workbook has no sheets")
            sheet = book.sheet_by_index(0)
            rows: list[tuple[Any, ...]] = []
            for rx in range(sheet.nrows):
                rows.append(tuple(
                    _xls_cell_value(cell, book.datemode) for cell in sheet.row(rx)
                ))
            return rows
        finally:
            book.release_resources()

    # ── Shared row handling ──────────────────────────────────────────

    @staticmethod
    def _rows_to_entries(
        rows: Iterable[Sequence[Any]], source: str, name: str
    ) -> IngestedRows:
        result = IngestedRows()
        header: list[str] | None = None

        for values in rows:
            if header is None:
                if all(v is None or not str(v).strip() for v in values):
                    continue
                header, header_warnings = dedupe_header(
                    [str(v).strip() if v is not None else "" for v in values]
                )
                result.warnings.extend(header_warnings)
                continue

            row = {
                column: (values[index] if index < len(values) else None)
                for index, column in enumerate(header)
                if column
            }
            if is_blank_row(row):
                continue
            result.entries.append(normalize_row(row, source))

        if header is None:
            logger.warning("Spreadsheet %s has an empty first sheet", name)
        return result


def _xls_cell_value(cell, datemode: int) -> Any:
    """Convert an xlrd cell into a plain Python value."""
    import xlrd

    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (xlrd.xldate.XLDateError, ValueError):
            return cell.value
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    return cell.value
