import logging
from typing import List

from errors import ExtractionError
from models import Athlete
from service.sheets_service import API_ERRORS, SheetsService

logger = logging.getLogger(__name__)

PROFILES_SHEET = "Profiles"
DASHBOARD_SHEET = "Dashboard"
PROFILES_RANGE = f"{PROFILES_SHEET}!A2:B"


class AthleteRepository:
    """Reads the athlete roster (name, team) from the Profiles tab."""
    def __init__(self, sheets: SheetsService):
        self._sheets = sheets

    def load_athletes(self, spreadsheet_id: str) -> List[Athlete]:
        try:
            titles = self._sheets.sheet_ids(spreadsheet_id)
        except API_ERRORS as err:
            raise ExtractionError(f"Failed to read spreadsheet {spreadsheet_id}: {err}") from err

        missing = [t for t in (PROFILES_SHEET, DASHBOARD_SHEET) if t not in titles]
        if missing:
            raise ExtractionError(
                f"Spreadsheet must have 'Profiles' and 'Dashboard' sheets (missing: {', '.join(missing)})"
            )

        try:
            rows = self._sheets.get_values(spreadsheet_id, PROFILES_RANGE)
        except API_ERRORS as err:
            raise ExtractionError(f"Failed to extract athlete data from the Profiles sheet: {err}") from err

        athletes: List[Athlete] = []
        for row in rows:
            if len(row) < 2:
                continue
            name = str(row[0]).strip()
            team = str(row[1]).strip()
            if name and team:
                athletes.append(Athlete(name=name, team=team))
        logger.info("Extracted %s athletes from %s (%s rows)", len(athletes), spreadsheet_id, len(rows))
        return athletes
