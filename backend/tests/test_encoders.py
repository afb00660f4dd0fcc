"""Tests for adrevenue.services.encoders."""

import csv
import io
from decimal import Decimal

import pytest
from openpyxl import load_workbook

from adrevenue.services.encoders import (
    SHEET_NAME,
    XLSX_MEDIA_TYPE,
    EncodedReport,
    ExportFormat,
    encode_csv,
    encode_report,
    encode_xlsx,
    parse_format,
)
from adrevenue.services.errors import UnsupportedCapabilityError, UnsupportedFormatError
from adrevenue.services.reports import ReportTable


@pytest.fixture()
def table() -> ReportTable:
    return ReportTable(
        headers=("Date", "Revenue", "Note"),
        rows=[
            ("2024-03-01", Decimal("150.00"), 'said "hi", twice'),
            ("2024-03-02", Decimal("25.50"), None),
        ],
    )


class TestParseFormat:
    def test_known_formats(self) -> None:
        assert parse_format("csv") is ExportFormat.CSV
        assert parse_format("xlsx") is ExportFormat.XLSX
        assert parse_format(None) is ExportFormat.CSV

    def test_pdf_not_implemented(self) -> None:
        with pytest.raises(UnsupportedCapabilityError) as exc:
            parse_format("pdf")
        assert exc.value.status_code == 501

    def test_unknown_format(self) -> None:
        with pytest.raises(UnsupportedFormatError) as exc:
            parse_format("docx")
        assert exc.value.status_code == 400


class TestCsv:
    def test_layout(self, table: ReportTable) -> None:
        text: str = encode_csv(table).decode("utf-8")
        lines: list[str] = text.split("\n")
        assert lines[0] == "Date,Revenue,Note"
        assert lines[1] == '"2024-03-01","150.00","said ""hi"", twice"'
        assert lines[2] == '"2024-03-02","25.50",""'
        assert text.endswith("\n")

    def test_parses_back(self, table: ReportTable) -> None:
        rows = list(csv.reader(io.StringIO(encode_csv(table).decode("utf-8"))))
        assert len(rows) == 3
        assert all(len(r) == 3 for r in rows)
        assert rows[1][2] == 'said "hi", twice'

    def test_empty_table_is_header_only(self) -> None:
        assert encode_csv(ReportTable(headers=("Date", "Revenue"))) == b"Date,Revenue\n"


class TestXlsx:
    def test_sheet_contents(self, table: ReportTable) -> None:
        wb = load_workbook(io.BytesIO(encode_xlsx(table)))
        assert wb.sheetnames == [SHEET_NAME]
        ws = wb[SHEET_NAME]
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0] == ("Date", "Revenue", "Note")
        assert rows[1] == ("2024-03-01", 150.0, 'said "hi", twice')
        assert rows[2] == ("2024-03-02", 25.5, None)
        assert ws.cell(1, 1).font.bold


def test_encode_report_names_file(table: ReportTable) -> None:
    csv_report: EncodedReport = encode_report(table, ExportFormat.CSV, "revenue-overview-2024-06-15")
    assert csv_report.media_type == "text/csv"
    assert csv_report.filename == "revenue-overview-2024-06-15.csv"
    assert csv_report.content_disposition == 'attachment; filename="revenue-overview-2024-06-15.csv"'

    xlsx_report: EncodedReport = encode_report(table, ExportFormat.XLSX, "revenue-overview-2024-06-15")
    assert xlsx_report.media_type == XLSX_MEDIA_TYPE
    assert xlsx_report.filename.endswith(".xlsx")
