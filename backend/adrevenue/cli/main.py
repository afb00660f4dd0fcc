"""Main CLI entry point."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from adrevenue.services.errors import ReportError

app = typer.Typer(
    name="adrevenue",
    help="Ad platform revenue reporting CLI",
    add_completion=False
)

console = Console()


def _fail(exc: ReportError) -> None:
    console.print(f"[red]Error ({exc.status_code}): {exc.message}[/red]")
    raise typer.Exit(code=1)


@app.command()
def init_db(
    force: bool = typer.Option(False, "--force", "-f", help="Drop and recreate tables")
):
    """Initialize the database schema."""
    from db.connection import init_database

    with console.status("Initializing database..."):
        created = init_database(drop_existing=force)

    if force:
        console.print("[yellow]Dropped existing tables[/yellow]")
    console.print(f"[green]Database initialized ({len(created)} tables created)[/green]")


@app.command()
def export(
    report_type: str = typer.Option("overview", "--type", "-t", help="transactions, payments, partners, advertisers, projections or overview"),
    fmt: str = typer.Option("csv", "--format", "-f", help="csv or xlsx"),
    range_: str = typer.Option("30d", "--range", "-r", help="7d, 30d, 90d, ytd or month"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Explicit start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="Explicit end (YYYY-MM-DD)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file path")
):
    """Export a revenue report to a file."""
    from adrevenue.services.export import ExportRequest, ExportService
    from config import get_settings
    from db.connection import get_session

    request = ExportRequest(report_type=report_type, format=fmt, range=range_, start_date=start, end_date=end)
    output_path = Path(output) if output else None

    console.print(f"Exporting {report_type} report as {fmt}...")

    try:
        with get_session() as session:
            result = ExportService(session).export_to_file(
                request,
                export_dir=get_settings().export_dir,
                output_path=output_path,
            )
    except ReportError as exc:
        _fail(exc)

    console.print(f"\n[green]Exported to: {result.output_path}[/green]")
    console.print(f"Range: {result.time_range.start} to {result.time_range.end}")
    console.print(f"Rows: {result.row_count}")


@app.command()
def project(
    range_: str = typer.Option("30d", "--range", "-r", help="7d, 30d, 90d, ytd or month"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Explicit start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="Explicit end (YYYY-MM-DD)")
):
    """Show the 12-month revenue projection."""
    from adrevenue.services.export import ExportService
    from adrevenue.services.reports import ReportType
    from adrevenue.services.time_range import resolve_time_range
    from db.connection import get_session

    try:
        time_range = resolve_time_range(range_, start, end)
        with get_session() as session:
            report = ExportService(session).build_table(ReportType.PROJECTIONS, time_range)
    except ReportError as exc:
        _fail(exc)

    table = Table(title="Revenue Projection")
    for header in report.headers:
        table.add_column(header, style="cyan" if header == "Month" else "green")
    for row in report.rows:
        table.add_row(*("-" if v is None else str(v) for v in row))

    console.print(table)


@app.command()
def summary(
    range_: str = typer.Option("30d", "--range", "-r", help="7d, 30d, 90d, ytd or month"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Explicit start (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="Explicit end (YYYY-MM-DD)")
):
    """Show revenue totals against the previous period."""
    from adrevenue.services.summary import RevenueSummaryService
    from db.connection import get_session

    try:
        with get_session() as session:
            data = RevenueSummaryService(session).get_summary(range_, start, end)
    except ReportError as exc:
        _fail(exc)

    table = Table(title=f"Revenue {data['period']['start'][:10]} to {data['period']['end'][:10]}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Revenue", f"{data['total_revenue']:,.2f}")
    table.add_row("Previous Period", f"{data['previous_total_revenue']:,.2f}")
    table.add_row("Revenue Growth", f"{data['revenue_growth']}%")
    table.add_row("Pending Revenue", f"{data['pending_revenue']:,.2f}")
    table.add_row("Completed Transactions", str(data["total_transactions"]))
    table.add_row("Average Transaction", f"{data['average_transaction_value']:,.2f}")
    table.add_row("Pending Payouts", str(data["pending_payouts"]))
    table.add_row("Failed Transactions", str(data["failed_transactions"]))
    table.add_row("Refunded", f"{data['refunded_amount']:,.2f}")
    table.add_row("Top Payment Method", data["top_payment_method"])

    console.print(table)


if __name__ == "__main__":
    app()
