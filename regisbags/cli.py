"""Command-line entrypoint for damaged-baggage reports."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from regisbags.application.delivery import SendReportEmailUseCase
from regisbags.application.dto import ReportResponse
from regisbags.application.use_cases import GenerateReportUseCase, ReportContext
from regisbags.config import SETTINGS, Settings
from regisbags.domain.errors import InvalidPeriodValue, RegisbagsError, RepositoryConnectivityError
from regisbags.domain.models import PeriodType
from regisbags.domain.repositories import IncidentRepository
from regisbags.infrastructure.delivery.edge_function_mailer import EdgeFunctionMailer
from regisbags.infrastructure.repositories.rest_repository import RestIncidentRepository
from regisbags.infrastructure.repositories.tabular_repository import TabularIncidentRepository
from regisbags.observability import setup_logging
from regisbags.presentation.pdf_report import render_pdf, render_report_html
from regisbags.presentation.records_export import render_csv, report_file_name
from regisbags.presentation.xlsx_export import build_report_workbook

FORMATS = ("text", "csv", "xlsx", "html", "pdf")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the damaged-baggage report for a day, week, month or year")
    parser.add_argument("period_type", choices=[kind.value for kind in PeriodType], help="Period granularity")
    parser.add_argument("period_value", help="YYYY-MM-DD, YYYY-Www, YYYY-MM or YYYY")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--source", type=str, help="CSV/XLSX/XLS export of the records table")
    source.add_argument("--remote", action="store_true", help="Query the hosted record store")
    parser.add_argument("--format", choices=FORMATS, default="text", help="Artifact to write")
    parser.add_argument("--output", type=str, help="Output path (defaults to the report file name)")
    parser.add_argument("--email", type=str, help="Also email the report to this address")
    return parser.parse_args(argv)


def build_repository(args: argparse.Namespace, settings: Settings) -> IncidentRepository:
    if args.remote:
        return RestIncidentRepository(settings)
    return TabularIncidentRepository(Path(args.source), settings=settings)


def render_artifact(response: ReportResponse, fmt: str, settings: Settings) -> bytes:
    report, records = response.report, response.records
    if fmt == "csv":
        return render_csv(records)
    if fmt == "xlsx":
        return build_report_workbook(report, records)
    if fmt == "html":
        return render_report_html(report, records, settings.station_name).encode("utf-8")
    if fmt == "pdf":
        return render_pdf(report, records, settings.station_name)
    raise ValueError(f"Unsupported format: {fmt}")


def print_summary(response: ReportResponse) -> None:
    report = response.report
    stats = report.stats
    print(f"Damage Report - {report.period_label}")
    print("=" * 40)
    print(f"Total records: {stats.total}")
    print(f"Counter: {stats.by_source.counter}")
    print(f"Siberia: {stats.by_source.siberia}")
    print(f"Signed: {stats.signed_count} ({stats.signature_rate}%)")
    print(f"Unsigned (critical): {stats.unsigned_count}")
    if stats.dominant_shift:
        print(f"Dominant shift: {stats.dominant_shift} ({stats.shift_counts.get(stats.dominant_shift, 0)})")
    if stats.top_airline:
        print(f"Top airline: {stats.top_airline.name} ({stats.top_airline.count})")
    if stats.top_category:
        print(f"Top damage: {stats.top_category.code} {stats.top_category.label} ({stats.top_category.count})")
    if stats.top_flights:
        print("\nTop flights:")
        for flight in stats.top_flights:
            print(f"- {flight.flight}: {flight.damages}")
    elif not stats.has_data:
        print("\nNo damaged baggage recorded in this period.")


def main(argv: list[str] | None = None, settings: Settings = SETTINGS) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging(settings.log_level, settings.json_logs)

    try:
        context = ReportContext.from_settings(build_repository(args, settings), settings)
        response = GenerateReportUseCase(context).execute((args.period_type, args.period_value))
        print_summary(response)

        if args.format != "text":
            default_name = report_file_name(response.report.generated_at, settings.report_file_prefix, settings.timezone)
            output = Path(args.output or f"{default_name}.{args.format}")
            output.write_bytes(render_artifact(response, args.format, settings))
            print(f"\nWrote {output}")

        if args.email:
            mailer = EdgeFunctionMailer(settings)
            payload = SendReportEmailUseCase(mailer, settings.signature_target).execute(response, args.email)
            print(f"Emailed report to {payload.to}")
    except InvalidPeriodValue as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except RepositoryConnectivityError as exc:
        print(f"Error: {exc}. Check your connection and try again.", file=sys.stderr)
        return 3
    except RegisbagsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
