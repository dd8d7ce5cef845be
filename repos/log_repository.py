import logging
from typing import Set

from errors import LogAppendError
from models import LOG_HEADER, LogEntry
from service.sheets_service import API_ERRORS, SheetsService

logger = logging.getLogger(__name__)

LOG_SHEET = "PDF_Log"
LOG_RANGE = f"{LOG_SHEET}!A:F"
LOG_HEADER_RANGE = f"{LOG_SHEET}!A1:F1"


class LogRepository:
    """Mirrors run results into the PDF_Log tab, creating it on first write."""
    def __init__(self, sheets: SheetsService):
        self._sheets = sheets
        self._known: Set[str] = set()

    def record(self, spreadsheet_id: str, entry: LogEntry) -> None:
        try:
            self._ensure_log_sheet(spreadsheet_id)
            self._sheets.append_values(spreadsheet_id, LOG_RANGE, [entry.to_row()])
        except API_ERRORS as err:
            raise LogAppendError(f"Failed to append log row for {entry.athlete_name}: {err}") from err

    def _ensure_log_sheet(self, spreadsheet_id: str) -> None:
        if spreadsheet_id in self._known:
            return
        if self._sheets.get_sheet_id(spreadsheet_id, LOG_SHEET) is None:
            logger.info("Creating %s sheet in %s", LOG_SHEET, spreadsheet_id)
            self._sheets.add_sheet(spreadsheet_id, LOG_SHEET, rows=1000, columns=len(LOG_HEADER))
        # A tab left behind by an earlier failed header write is still headerless.
        if not self._sheets.get_values(spreadsheet_id, LOG_HEADER_RANGE):
            self._sheets.update_values(spreadsheet_id, LOG_HEADER_RANGE, [list(LOG_HEADER)])
        self._known.add(spreadsheet_id)
