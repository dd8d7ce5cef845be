import logging
from pathlib import Path
from typing import Callable, Optional

import requests

import export_query as eq
from errors import AuthError, ExportError
from repos.athlete_repository import DASHBOARD_SHEET
from service.sheets_service import API_ERRORS, SheetsService

logger = logging.getLogger(__name__)


class PdfExporter:
    """Exports the Dashboard tab through Google's export endpoint and saves it locally."""
    def __init__(
        self,
        sheets: SheetsService,
        token_provider: Callable[[], str],
        output_dir: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 60,
    ):
        self._sheets = sheets
        self._token_provider = token_provider
        self._output_dir = Path(output_dir)
        self._session = session
        self._timeout = timeout

    def export(self, spreadsheet_id: str, file_name: str) -> str:
        try:
            gid = self._sheets.get_sheet_id(spreadsheet_id, DASHBOARD_SHEET)
        except API_ERRORS as err:
            raise ExportError(f"Failed to look up the Dashboard sheet: {err}") from err
        if gid is None:
            raise ExportError(f"Sheet '{DASHBOARD_SHEET}' not found")

        try:
            token = self._token_provider()
        except AuthError as err:
            raise ExportError(f"Failed to export PDF: {err}") from err

        url = eq.build_export_url(spreadsheet_id, gid)
        try:
            pdf = eq.fetch_pdf(url, token, session=self._session, timeout=self._timeout)
        except eq.ExportRequestError as err:
            raise ExportError(f"Failed to export PDF: {err}") from err

        # Athlete and team names may contain path separators.
        target = self._output_dir / file_name.replace("/", "-").replace("\\", "-")
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(pdf)
        except OSError as err:
            raise ExportError(f"Failed to save {target}: {err}") from err
        logger.info("Saved %s (%s bytes)", target, len(pdf))
        return str(target)
