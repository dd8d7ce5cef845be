from typing import Dict

from config import DEFAULT_SCORE_FORMULA
from errors import UpdateError
from repos.athlete_repository import DASHBOARD_SHEET
from service.sheets_service import API_ERRORS, SheetsService, update_cells_request

# Zero-based grid coordinates: name/team in A1:B1, score formula in D8.
HEADER_ROW, HEADER_COLUMN = 0, 0
SCORE_ROW, SCORE_COLUMN = 7, 3


class DashboardRepository:
    """Points the Dashboard tab at one athlete before it is exported.

    Name and team are written as literal strings so values such as "007" or
    "=Smith" reach the sheet exactly as they appear in Profiles; only the
    score cell is entered as a formula.
    """
    def __init__(self, sheets: SheetsService, score_formula: str = DEFAULT_SCORE_FORMULA):
        self._sheets = sheets
        self._score_formula = score_formula
        self._gids: Dict[str, int] = {}

    def show_athlete(self, spreadsheet_id: str, name: str, team: str) -> None:
        try:
            gid = self._dashboard_gid(spreadsheet_id)
            self._sheets.batch_update(spreadsheet_id, [
                update_cells_request(gid, HEADER_ROW, HEADER_COLUMN, [
                    {"userEnteredValue": {"stringValue": name}},
                    {"userEnteredValue": {"stringValue": team}},
                ]),
                update_cells_request(gid, SCORE_ROW, SCORE_COLUMN, [
                    {"userEnteredValue": {"formulaValue": self._score_formula}},
                ]),
            ])
        except API_ERRORS as err:
            raise UpdateError(f"Failed to update dashboard with athlete data: {err}") from err

    def _dashboard_gid(self, spreadsheet_id: str) -> int:
        if spreadsheet_id not in self._gids:
            gid = self._sheets.get_sheet_id(spreadsheet_id, DASHBOARD_SHEET)
            if gid is None:
                raise UpdateError(f"Sheet '{DASHBOARD_SHEET}' not found")
            self._gids[spreadsheet_id] = gid
        return self._gids[spreadsheet_id]
