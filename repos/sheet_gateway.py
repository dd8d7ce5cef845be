"""Sheet Data Gateway: the four spreadsheet operations a run depends on.

Two interchangeable implementations share the protocol:
 - GoogleSheetGateway talks to the Sheets API and the PDF export endpoint
 - DemoSheetGateway keeps everything in memory (offline demo and tests)
"""

import logging
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from errors import ExtractionError
from models import Athlete, LogEntry
from repos.athlete_repository import AthleteRepository
from repos.dashboard_repository import DashboardRepository
from repos.log_repository import LogRepository
from repos.pdf_exporter import PdfExporter

logger = logging.getLogger(__name__)


class SheetGateway(Protocol):
    def extract_athletes(self, sheet_id: str) -> List[Athlete]:
        """Return the roster, or raise ExtractionError when the sheet layout is wrong."""

    def update_dashboard(self, sheet_id: str, name: str, team: str) -> None:
        """Show one athlete on the Dashboard tab; raises UpdateError."""

    def export_to_pdf(self, sheet_id: str, file_name: str) -> str:
        """Render the Dashboard tab to PDF and return a reference to it; raises ExportError."""

    def append_log(self, sheet_id: str, entry: LogEntry) -> None:
        """Mirror a result into the PDF_Log tab; raises LogAppendError."""


class GoogleSheetGateway:
    def __init__(
        self,
        athletes: AthleteRepository,
        dashboard: DashboardRepository,
        exporter: PdfExporter,
        log: LogRepository,
    ):
        self._athletes = athletes
        self._dashboard = dashboard
        self._exporter = exporter
        self._log = log

    def extract_athletes(self, sheet_id: str) -> List[Athlete]:
        return self._athletes.load_athletes(sheet_id)

    def update_dashboard(self, sheet_id: str, name: str, team: str) -> None:
        self._dashboard.show_athlete(sheet_id, name, team)

    def export_to_pdf(self, sheet_id: str, file_name: str) -> str:
        return self._exporter.export(sheet_id, file_name)

    def append_log(self, sheet_id: str, entry: LogEntry) -> None:
        self._log.record(sheet_id, entry)


DEMO_SHEET_ID = "demo-file-id"
DEMO_ATHLETES = (
    Athlete(name="Jordan Ellis", team="Falcons"),
    Athlete(name="Sam Okafor", team="Falcons"),
    Athlete(name="Riley Chen", team="Harriers"),
    Athlete(name="Alex Moreno", team="Harriers"),
)


class DemoSheetGateway:
    """In-memory gateway. Records every call so a run can be inspected afterwards."""
    def __init__(self, athletes: Sequence[Athlete] = DEMO_ATHLETES, sheet_id: str = DEMO_SHEET_ID):
        self._rosters: Dict[str, List[Athlete]] = {sheet_id: list(athletes)}
        self.dashboard_writes: List[Tuple[str, str, str]] = []
        self.exports: List[str] = []
        self.log_rows: Dict[str, List[List[str]]] = {}

    def extract_athletes(self, sheet_id: str) -> List[Athlete]:
        roster: Optional[List[Athlete]] = self._rosters.get(sheet_id)
        if roster is None:
            raise ExtractionError(f"Spreadsheet {sheet_id} not found")
        return list(roster)

    def update_dashboard(self, sheet_id: str, name: str, team: str) -> None:
        self.dashboard_writes.append((sheet_id, name, team))

    def export_to_pdf(self, sheet_id: str, file_name: str) -> str:
        self.exports.append(file_name)
        logger.debug("Demo export of %s", file_name)
        return file_name

    def append_log(self, sheet_id: str, entry: LogEntry) -> None:
        self.log_rows.setdefault(sheet_id, []).append(entry.to_row())
