"""Tests for adrevenue.services.export."""

from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from adrevenue.services.encoders import ExportFormat
from adrevenue.services.errors import (
    InvalidTimeRangeError,
    UnsupportedCapabilityError,
    UnsupportedFormatError,
)
from adrevenue.services.export import (
    ExportRequest,
    ExportResult,
    ExportService,
    GeneratedExport,
    filename_stem,
)
from adrevenue.services.reports import ReportType
from db.models import Transactions, Wallets


class _UnreachableSource:
    """Fails the test if any report data is requested."""

    def __getattr__(self, name: str):
        raise AssertionError(f"store was queried: {name}")


def _seed_revenue(session: Session) -> None:
    wallet = Wallets()
    session.add(wallet)
    session.flush()
    for day, amount in ((1, "100.00"), (1, "50.00"), (4, "25.00")):
        session.add(
            Transactions(
                wallet_id=wallet.id,
                type="DEPOSIT",
                amount=Decimal(amount),
                status="COMPLETED",
                date=datetime(2024, 3, day, 9),
            )
        )
    session.flush()


def test_filename_stem() -> None:
    assert filename_stem(ReportType.PARTNERS, datetime(2024, 6, 15, 23, 59)) == "revenue-partners-2024-06-15"


class TestGenerateExport:
    def test_overview_csv(self, session: Session, now: datetime) -> None:
        _seed_revenue(session)
        svc = ExportService(session)

        generated: GeneratedExport = svc.generate_export(
            ExportRequest(start_date="2024-03-01", end_date="2024-03-31"), now=now
        )

        assert generated.report_type is ReportType.OVERVIEW
        assert generated.format is ExportFormat.CSV
        assert generated.row_count == 2
        assert generated.encoded.filename == "revenue-overview-2024-06-15.csv"
        assert generated.encoded.content.decode("utf-8") == (
            'Date,Revenue\n"2024-03-01","150.00"\n"2024-03-04","25.00"\n'
        )

    def test_unknown_type_falls_back_to_overview(self, session: Session, now: datetime) -> None:
        generated: GeneratedExport = ExportService(session).generate_export(
            ExportRequest(report_type="nonsense"), now=now
        )
        assert generated.report_type is ReportType.OVERVIEW
        assert generated.encoded.content == b"Date,Revenue\n"

    def test_pdf_rejected_before_store_access(self, session: Session) -> None:
        svc = ExportService(session, source=_UnreachableSource())  # type: ignore[arg-type]
        with pytest.raises(UnsupportedCapabilityError):
            svc.generate_export(ExportRequest(format="pdf"))

    def test_unknown_format_rejected_before_store_access(self, session: Session) -> None:
        svc = ExportService(session, source=_UnreachableSource())  # type: ignore[arg-type]
        with pytest.raises(UnsupportedFormatError):
            svc.generate_export(ExportRequest(format="json"))

    def test_inverted_range_rejected(self, session: Session) -> None:
        svc = ExportService(session, source=_UnreachableSource())  # type: ignore[arg-type]
        with pytest.raises(InvalidTimeRangeError):
            svc.generate_export(ExportRequest(start_date="2024-04-01", end_date="2024-03-01"))


class TestExportToFile:
    def test_writes_default_filename(self, session: Session, now: datetime, tmp_path: Path) -> None:
        _seed_revenue(session)
        result: ExportResult = ExportService(session).export_to_file(
            ExportRequest(format="xlsx", start_date="2024-03-01", end_date="2024-03-31"),
            export_dir=tmp_path / "exports",
            now=now,
        )

        assert result.output_path == tmp_path / "exports" / "revenue-overview-2024-06-15.xlsx"
        assert result.output_path.exists()
        assert result.row_count == 2
        assert result.byte_count == result.output_path.stat().st_size

    def test_explicit_output_path(self, session: Session, now: datetime, tmp_path: Path) -> None:
        target: Path = tmp_path / "out" / "march.csv"
        result: ExportResult = ExportService(session).export_to_file(
            ExportRequest(report_type="transactions"),
            export_dir=tmp_path,
            output_path=target,
            now=now,
        )
        assert result.output_path == target
        assert target.read_text(encoding="utf-8").startswith("ID,Type,Amount,")
