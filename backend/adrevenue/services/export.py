"""Export service: resolve range, assemble a report, encode it."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import structlog
from sqlalchemy.orm import Session

from adrevenue.services._helpers import utc_now
from adrevenue.services.encoders import EncodedReport, ExportFormat, encode_report, parse_format
from adrevenue.services.reports import (
    ReportContext,
    ReportTable,
    ReportType,
    build_report,
    parse_report_type,
)
from adrevenue.services.sources import RecordSource
from adrevenue.services.time_range import TimeRange, resolve_time_range

logger = structlog.get_logger(__name__)


@dataclass
class ExportRequest:
    report_type: str | None = None
    format: str | None = None
    range: str | None = None
    start_date: str | None = None
    end_date: str | None = None


@dataclass
class GeneratedExport:
    report_type: ReportType
    format: ExportFormat
    time_range: TimeRange
    table: ReportTable
    encoded: EncodedReport

    @property
    def row_count(self) -> int:
        return len(self.table.rows)


@dataclass
class ExportResult:
    report_type: ReportType
    format: ExportFormat
    time_range: TimeRange
    output_path: Path
    row_count: int
    byte_count: int


def filename_stem(report_type: ReportType, now: datetime) -> str:
    return f"revenue-{report_type.value}-{now.date().isoformat()}"


class ExportService:
    """Runs the revenue export pipeline for one request."""

    def __init__(self, session: Session, source: RecordSource | None = None) -> None:
        self.session: Session = session
        self.source: RecordSource = source or RecordSource(session)

    def build_table(
        self,
        report_type: ReportType,
        time_range: TimeRange,
        now: datetime | None = None,
    ) -> ReportTable:
        ctx = ReportContext(source=self.source, time_range=time_range, now=now or utc_now())
        return build_report(report_type, ctx)

    def generate_export(self, request: ExportRequest, now: datetime | None = None) -> GeneratedExport:
        """Validate, query, assemble and encode.

        The format is checked first so an unsupported or unimplemented
        format never reaches the store.
        """
        now = now or utc_now()
        fmt: ExportFormat = parse_format(request.format)
        report_type: ReportType = parse_report_type(request.report_type)
        time_range: TimeRange = resolve_time_range(
            request.range, request.start_date, request.end_date, now=now
        )

        table: ReportTable = self.build_table(report_type, time_range, now)
        encoded: EncodedReport = encode_report(table, fmt, filename_stem(report_type, now))
        logger.info(
            "report_exported",
            report_type=report_type.value,
            format=fmt.value,
            filename=encoded.filename,
            rows=len(table.rows),
            bytes=len(encoded.content),
        )
        return GeneratedExport(
            report_type=report_type,
            format=fmt,
            time_range=time_range,
            table=table,
            encoded=encoded,
        )

    def export_to_file(
        self,
        request: ExportRequest,
        export_dir: Path,
        output_path: Path | None = None,
        now: datetime | None = None,
    ) -> ExportResult:
        """Run the pipeline and write the encoded report to disk."""
        generated: GeneratedExport = self.generate_export(request, now=now)

        if output_path is None:
            output_path = export_dir / generated.encoded.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(generated.encoded.content)

        return ExportResult(
            report_type=generated.report_type,
            format=generated.format,
            time_range=generated.time_range,
            output_path=output_path,
            row_count=generated.row_count,
            byte_count=len(generated.encoded.content),
        )
