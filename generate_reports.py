"""CLI entry-point to batch-generate athlete performance PDFs from a Google Sheet.

Workflow:
- Sign in to Google (cached token, browser flow on first use)
- Read athletes (name, team) from the spreadsheet's Profiles tab
- For each athlete: fill the Dashboard tab, export it as PDF, log to PDF_Log

Example:
  py generate_reports.py --spreadsheet https://docs.google.com/spreadsheets/d/<id>/edit
  py generate_reports.py --demo --settle-delay 0 --rate-limit-delay 0
"""

from __future__ import annotations

import argparse
import logging
import re
import signal
from typing import List

from config import EnvironmentConfig, ReportSettings
from errors import AuthError, ExtractionError
from models import LogEntry, LogStatus, ProcessingProgress
from repos.athlete_repository import AthleteRepository
from repos.batch_processor import BatchProcessor
from repos.dashboard_repository import DashboardRepository
from repos.log_repository import LogRepository
from repos.pdf_exporter import PdfExporter
from repos.settings_repository import SettingsRepository, display_title
from repos.sheet_gateway import DEMO_SHEET_ID, DemoSheetGateway, GoogleSheetGateway
from service.google_auth_service import DemoAuthService, GoogleAuthService
from service.sheets_service import SheetsService


logger = logging.getLogger(__name__)

_SPREADSHEET_URL = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")


def parse_spreadsheet_id(value: str) -> str:
    """Accept a bare spreadsheet ID or any docs.google.com spreadsheet URL."""
    value = (value or "").strip()
    match = _SPREADSHEET_URL.search(value)
    if match:
        return match.group(1)
    if not value or "/" in value:
        raise ValueError(f"Not a spreadsheet ID or URL: {value!r}")
    return value


def format_progress(progress: ProcessingProgress) -> str:
    title = "Processing Complete" if progress.is_complete else "Generating PDFs"
    line = f"{title} {progress.current}/{progress.total} ({progress.percentage:.0f}%)"
    if progress.current_athlete and not progress.is_complete:
        line += f" - {progress.current_athlete}"
    return line


def format_results(entries: List[LogEntry]) -> List[str]:
    lines = []
    for e in entries:
        badge = {LogStatus.SUCCESS: "OK", LogStatus.SKIP: "SKIP", LogStatus.ERROR: "ERROR"}[e.status]
        line = f"[{badge}] {e.team} / {e.athlete_name}: {e.message}"
        if e.pdf_reference:
            line += f" -> {e.pdf_reference}"
        lines.append(line)
    return lines


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate one performance PDF per athlete from a Google Sheet.")
    p.add_argument(
        "--spreadsheet",
        default=None,
        help="Spreadsheet ID or URL. Must contain 'Profiles' and 'Dashboard' sheets.",
    )
    p.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample data instead of Google (no sign-in, nothing is written).",
    )
    p.add_argument("--output", default=None, help="Directory for generated PDFs (default: REPORT_OUTPUT_DIR).")
    p.add_argument("--settle-delay", type=float, default=None, help="Seconds to wait after updating the dashboard.")
    p.add_argument("--rate-limit-delay", type=float, default=None, help="Seconds to wait between athletes.")
    p.add_argument("--formula", default=None, help="Score formula written to Dashboard!D8.")
    p.add_argument(
        "--max-athletes",
        type=int,
        default=None,
        help="Only process the first N athletes (useful for smoke tests).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="List the athletes that would be processed without generating anything.",
    )
    p.add_argument("--sign-out", action="store_true", help="Revoke and delete the cached Google session, then exit.")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity.",
    )
    return p


def _override(report: ReportSettings, args: argparse.Namespace) -> ReportSettings:
    return ReportSettings(
        output_dir=args.output or report.output_dir,
        settle_delay=max(0.0, args.settle_delay) if args.settle_delay is not None else report.settle_delay,
        rate_limit_delay=(
            max(0.0, args.rate_limit_delay) if args.rate_limit_delay is not None else report.rate_limit_delay
        ),
        score_formula=args.formula or report.score_formula,
        export_timeout=report.export_timeout,
        settings_file=report.settings_file,
    )


def build_google_gateway(auth: GoogleAuthService, report: ReportSettings) -> GoogleSheetGateway:
    sheets = SheetsService(auth.credentials)
    return GoogleSheetGateway(
        athletes=AthleteRepository(sheets),
        dashboard=DashboardRepository(sheets, score_formula=report.score_formula),
        exporter=PdfExporter(sheets, auth.access_token, report.output_dir, timeout=report.export_timeout),
        log=LogRepository(sheets),
    )


def main() -> int:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Keep output focused: per-request logs from the HTTP stack are noisy at INFO.
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    report = _override(EnvironmentConfig.load_report_settings(), args)
    settings = SettingsRepository(report.settings_file).load()
    print(display_title(settings))

    if args.demo:
        auth = DemoAuthService()
    else:
        try:
            auth = GoogleAuthService(EnvironmentConfig.load_credentials())
        except ValueError as err:
            logger.error("Google configuration missing: %s", err)
            print(f"Cannot sign in: {err}")
            return 2

    try:
        auth.initialize()
        if args.sign_out:
            auth.sign_out()
            print("Signed out.")
            return 0
        if not auth.is_signed_in():
            auth.sign_in()
    except AuthError as err:
        logger.error("Authentication failed: %s", err)
        print(f"Sign-in failed: {err}")
        return 1

    if args.demo:
        gateway = DemoSheetGateway()
        sheet_id = DEMO_SHEET_ID
    else:
        if not args.spreadsheet:
            print("--spreadsheet is required unless --demo is given.")
            return 2
        try:
            sheet_id = parse_spreadsheet_id(args.spreadsheet)
        except ValueError as err:
            print(str(err))
            return 2
        gateway = build_google_gateway(auth, report)

    try:
        athletes = gateway.extract_athletes(sheet_id)
    except ExtractionError as err:
        logger.error("Extraction failed for %s: %s", sheet_id, err)
        print(f"Failed to process the selected file: {err}")
        return 1

    if args.max_athletes is not None:
        athletes = athletes[: max(0, args.max_athletes)]
    if not athletes:
        print("No athletes found in the Profiles sheet.")
        return 0

    print(f"Found {len(athletes)} athletes.")
    if args.dry_run:
        for a in athletes:
            print(f"  {a.team} / {a.name} -> {a.file_name}")
        return 0

    cancel_requested = False

    def _request_cancel(signum, frame):
        nonlocal cancel_requested
        if cancel_requested:
            raise KeyboardInterrupt
        cancel_requested = True
        print("Cancelling after the current athlete (Ctrl-C again to abort)...")

    previous_handler = signal.signal(signal.SIGINT, _request_cancel)
    processor = BatchProcessor(
        gateway,
        settle_delay=report.settle_delay,
        rate_limit_delay=report.rate_limit_delay,
        should_cancel=lambda: cancel_requested,
    )
    try:
        results = processor.run(sheet_id, athletes, on_progress=lambda p: print(format_progress(p)))
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    for line in format_results(results):
        print(line)
    for warning in processor.warnings:
        print(f"WARNING: {warning}")

    failed = sum(1 for e in results if e.status is LogStatus.ERROR)
    if failed:
        logger.warning("Completed with failures=%s of %s athletes.", failed, len(results))
        print(f"Completed with failures={failed}. See logs for details.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
