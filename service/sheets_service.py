import logging
from typing import Any, Dict, List, Optional

from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

_discovery_logger = logging.getLogger("googleapiclient.discovery_cache")

USER_ENTERED = "USER_ENTERED"

# What a Sheets call raises on API or transport failure.
API_ERRORS = (HttpError, GoogleAuthError, OSError)


def update_cells_request(
    sheet_id: int, row: int, column: int, cells: List[Dict[str, Any]]
) -> Dict[str, Any]:
    """An updateCells request writing `cells` left to right from (row, column), zero-based."""
    return {
        "updateCells": {
            "start": {"sheetId": sheet_id, "rowIndex": row, "columnIndex": column},
            "rows": [{"values": cells}],
            "fields": "userEnteredValue",
        }
    }


class SheetsService:
    """High-level wrapper for Sheets v4 calls (values + batch updates).
       Repositories depend on this abstraction rather than the raw discovery client.
    """
    def __init__(self, credentials: Any = None, service: Any = None):
        # The file cache warning is emitted on every build() with oauth2client absent.
        _discovery_logger.setLevel(logging.WARNING)
        if service is None:
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self._service = service

    @property
    def client(self) -> Any:
        return self._service

    def sheet_ids(self, spreadsheet_id: str) -> Dict[str, int]:
        """Map of tab title to numeric sheet id (the export endpoint's gid)."""
        meta = self._service.spreadsheets().get(
            spreadsheetId=spreadsheet_id,
            fields="sheets.properties",
        ).execute()
        return {
            s["properties"]["title"]: int(s["properties"]["sheetId"])
            for s in meta.get("sheets", [])
        }

    def get_sheet_id(self, spreadsheet_id: str, title: str) -> Optional[int]:
        return self.sheet_ids(spreadsheet_id).get(title)

    def get_values(self, spreadsheet_id: str, range_: str) -> List[List[Any]]:
        result = self._service.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id,
            range=range_,
        ).execute()
        return result.get("values", [])

    def update_values(self, spreadsheet_id: str, range_: str, values: List[List[Any]]) -> None:
        self._service.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=range_,
            valueInputOption=USER_ENTERED,
            body={"values": values},
        ).execute()

    def append_values(self, spreadsheet_id: str, range_: str, values: List[List[Any]]) -> None:
        self._service.spreadsheets().values().append(
            spreadsheetId=spreadsheet_id,
            range=range_,
            valueInputOption=USER_ENTERED,
            insertDataOption="INSERT_ROWS",
            body={"values": values},
        ).execute()

    def batch_update(self, spreadsheet_id: str, requests: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._service.spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={"requests": requests},
        ).execute()

    def add_sheet(self, spreadsheet_id: str, title: str, *, rows: int = 1000, columns: int = 26) -> None:
        self.batch_update(spreadsheet_id, [{
            "addSheet": {
                "properties": {
                    "title": title,
                    "gridProperties": {"rowCount": rows, "columnCount": columns},
                }
            }
        }])
