"""CSV and XLSX adapters for tour sheets.

Both adapters turn bytes into ``SourceRow`` items keyed by physical column
key and turn flattened rows back into bytes, so the import and export
pipelines stay format-agnostic.
"""

import csv
import io
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from tourbridge.schemas.transfer import ExportFormat
from tourbridge.services.transfer.columns import (
    TOUR_COLUMNS,
    ColumnDefinition,
    build_header_map,
    get_headers,
    match_headers,
)

SHEET_TITLE = "Tours"

# Header fills per registry section: (first, last) definition index -> ARGB
SECTION_FILLS: tuple[tuple[tuple[int, int], str], ...] = (
    ((0, 4), "FFD6EAF8"),  # Basic Information
    ((5, 9), "FFD5F5E3"),  # Pricing
    ((10, 11), "FFFEF9E7"),  # Duration
    ((12, 19), "FFFDEBD0"),  # Logistics
    ((20, 22), "FFE8DAEF"),  # Inclusions
    ((23, 27), "FFFDEDEC"),  # Audience & Difficulty
    ((28, 32), "FFD1F2EB"),  # Accessibility
    ((33, 36), "FFF2F3F4"),  # Relationships
    ((37, 42), "FFFFFFFF"),  # Status/Meta
)
DEFAULT_FILL = "FFFFFFFF"
HEADER_BORDER_COLOR = "FFCCCCCC"

MIN_COLUMN_WIDTH = 10
MAX_COLUMN_WIDTH = 50

_SEP_HINT = re.compile(r"^sep=(.)$")


class TableParseError(ValueError):
    """Raised when an uploaded file cannot be read as a table at all."""


@dataclass
class SourceRow:
    """One data row of an uploaded sheet."""

    number: int  # 1-indexed sheet row, header is row 1
    cells: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not any(value.strip() for value in self.cells.values())


def _decode(file_content: bytes) -> str:
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return file_content.decode("latin-1")


def _split_separator_hint(text: str) -> tuple[str, str]:
    """Strip a leading ``sep=X`` line, returning (delimiter, remaining text)."""
    first_line, newline, rest = text.partition("\n")
    match = _SEP_HINT.match(first_line.rstrip("\r").strip())
    if match:
        return match.group(1), rest
    return ",", text


class CsvAdapter:
    """Delimited text with a byte-order mark and a ``sep=,`` hint line."""

    format = ExportFormat.CSV
    extension = "csv"
    content_type = "text/csv; charset=utf-8"

    def __init__(self, columns: Sequence[ColumnDefinition] = TOUR_COLUMNS):
        self.columns = columns

    def parse(self, file_content: bytes) -> list[SourceRow]:
        """Parse CSV bytes into data rows.

        Short and long records are tolerated. Blank records are skipped.
        Headers are matched by display label or column key; unmatched
        headers are kept as-is.

        Raises:
            TableParseError: If the quoting is malformed.
        """
        delimiter, text = _split_separator_hint(_decode(file_content))
        reader = csv.reader(io.StringIO(text), delimiter=delimiter, strict=True)
        header_map = build_header_map(self.columns)

        keys: Optional[list[str]] = None
        rows: list[SourceRow] = []
        try:
            for record in reader:
                if not any(value.strip() for value in record):
                    continue
                if keys is None:
                    matched = match_headers(record, header_map)
                    keys = [key or raw.strip() for key, raw in zip(matched, record)]
                    continue
                cells = {
                    key: value.strip()
                    for key, value in zip(keys, record)
                    if key
                }
                rows.append(SourceRow(number=len(rows) + 2, cells=cells))
        except csv.Error as e:
            raise TableParseError(f"Failed to parse CSV: {e}") from e

        return [row for row in rows if not row.is_empty()]

    def serialize(self, rows: Sequence[dict[str, str]]) -> bytes:
        """Write rows as CSV with a byte-order mark, a ``sep=,`` line and label headers."""
        display_headers, column_keys = get_headers(self.columns)

        output = io.StringIO()
        output.write("\ufeff")
        output.write("sep=,\r\n")
        writer = csv.writer(output)

        writer.writerow(display_headers)
        for row in rows:
            writer.writerow([row.get(key, "") for key in column_keys])

        return output.getvalue().encode("utf-8")


def _cell_to_string(value: Any) -> str:
    """Stringify a worksheet cell regardless of its type."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def _section_fill(definition_index: int) -> str:
    for (first, last), color in SECTION_FILLS:
        if first <= definition_index <= last:
            return color
    return DEFAULT_FILL


class XlsxAdapter:
    """Single-sheet workbook with a styled, frozen header row."""

    format = ExportFormat.XLSX
    extension = "xlsx"
    content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def __init__(self, columns: Sequence[ColumnDefinition] = TOUR_COLUMNS):
        self.columns = columns

    def parse(self, file_content: bytes) -> list[SourceRow]:
        """Parse the first worksheet into data rows.

        Header cells are matched case-insensitively by display label or
        column key. Unmatched columns are ignored.

        Raises:
            TableParseError: If the workbook is unreadable or no header matches.
        """
        try:
            wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
        except (BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
            raise TableParseError(f"Unable to read spreadsheet: {e}") from e

        try:
            if not wb.worksheets:
                raise TableParseError("Spreadsheet has no worksheets")
            ws = wb.worksheets[0]
            row_iter = ws.iter_rows(values_only=True)

            try:
                raw_headers = next(row_iter)
            except StopIteration:
                raise TableParseError("Spreadsheet is empty") from None

            keys = match_headers(raw_headers, build_header_map(self.columns))
            if not any(keys):
                raise TableParseError("No recognized columns found in the header row")

            rows: list[SourceRow] = []
            for number, values in enumerate(row_iter, start=2):
                cells = {
                    key: _cell_to_string(value)
                    for key, value in zip(keys, values)
                    if key is not None
                }
                row = SourceRow(number=number, cells=cells)
                if not row.is_empty():
                    rows.append(row)
        finally:
            wb.close()

        return rows

    def serialize(self, rows: Sequence[dict[str, str]]) -> bytes:
        """Write rows to a single ``Tours`` worksheet."""
        display_headers, column_keys = get_headers(self.columns)
        definition_indexes = [
            index
            for index, col in enumerate(self.columns)
            for _ in col.physical_keys
        ]

        wb = Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE

        header_font = Font(bold=True)
        header_border = Border(bottom=Side(style="thin", color=HEADER_BORDER_COLOR))

        # Write header
        for col_idx, header in enumerate(display_headers, 1):
            color = _section_fill(definition_indexes[col_idx - 1])
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
            cell.border = header_border

        # Write data rows
        for row_idx, row in enumerate(rows, 2):
            for col_idx, key in enumerate(column_keys, 1):
                value = ILLEGAL_CHARACTERS_RE.sub("", row.get(key, ""))
                if value:
                    cell = ws.cell(row=row_idx, column=col_idx, value=value)
                    # Leading "=" stays literal text, not a formula
                    cell.data_type = "s"

        # Auto-adjust column widths
        for col_idx, (header, key) in enumerate(zip(display_headers, column_keys), 1):
            max_length = max([len(header)] + [len(row.get(key, "")) for row in rows])
            width = math.ceil(max_length * 1.2)
            ws.column_dimensions[get_column_letter(col_idx)].width = min(
                max(width, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH
            )

        # Freeze header row
        ws.freeze_panes = "A2"

        output = io.BytesIO()
        wb.save(output)
        return output.getvalue()


Adapter = CsvAdapter | XlsxAdapter


def get_adapter(export_format: ExportFormat) -> Adapter:
    """Return the adapter for a format."""
    adapters = {
        ExportFormat.CSV: CsvAdapter,
        ExportFormat.XLSX: XlsxAdapter,
    }
    return adapters[ExportFormat(export_format)]()


def get_content_type(export_format: ExportFormat) -> str:
    """Get the MIME type for an export format."""
    return get_adapter(export_format).content_type


def generate_export_filename(export_format: ExportFormat, today: Optional[date] = None) -> str:
    """Build ``tours-export-YYYY-MM-DD.<ext>`` for a download."""
    today = today or date.today()
    return f"tours-export-{today.isoformat()}.{get_adapter(export_format).extension}"
