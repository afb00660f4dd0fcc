"""Serialize a ReportTable to CSV or an XLSX workbook."""

import csv
import io
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from openpyxl import Workbook
from openpyxl.styles import Font

from adrevenue.services.errors import UnsupportedCapabilityError, UnsupportedFormatError
from adrevenue.services.reports import Cell, ReportTable

SHEET_NAME = "Revenue Data"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"


DEFAULT_FORMAT = ExportFormat.CSV


@dataclass(frozen=True)
class EncodedReport:
    content: bytes
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def parse_format(value: str | None) -> ExportFormat:
    """Validate the requested format before any data is read.

    Unknown formats raise ``UnsupportedFormatError``; PDF is recognised
    but raises ``UnsupportedCapabilityError``.
    """
    try:
        fmt: ExportFormat = ExportFormat(value or DEFAULT_FORMAT.value)
    except ValueError as e:
        raise UnsupportedFormatError() from e
    if fmt is ExportFormat.PDF:
        raise UnsupportedCapabilityError()
    return fmt


def _csv_value(v: Cell) -> str:
    if v is None:
        return ""
    return str(v)


def encode_csv(table: ReportTable) -> bytes:
    """Header line, then one line per row with every value quoted."""
    buf = io.StringIO()
    csv.writer(buf, lineterminator="\n").writerow(table.headers)
    rows = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in table.rows:
        rows.writerow([_csv_value(v) for v in row])
    return buf.getvalue().encode("utf-8")


def _cell_value(v: Cell) -> str | int | float | None:
    """Convert value for Excel (Decimal -> float)."""
    if isinstance(v, Decimal):
        return float(v)
    return v


def encode_xlsx(table: ReportTable) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME
    ws.append(list(table.headers))
    for c in range(1, len(table.headers) + 1):
        ws.cell(1, c).font = Font(bold=True)
    for row in table.rows:
        ws.append([_cell_value(v) for v in row])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def encode_report(table: ReportTable, fmt: ExportFormat, filename_stem: str) -> EncodedReport:
    if fmt is ExportFormat.CSV:
        return EncodedReport(encode_csv(table), "text/csv", f"{filename_stem}.csv")
    if fmt is ExportFormat.XLSX:
        return EncodedReport(encode_xlsx(table), XLSX_MEDIA_TYPE, f"{filename_stem}.xlsx")
    if fmt is ExportFormat.PDF:
        raise UnsupportedCapabilityError()
    raise UnsupportedFormatError()
