import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export"
PDF_MAGIC = b"%PDF"


class ExportRequestError(Exception):
    """The export endpoint did not return a PDF document."""


def build_export_url(spreadsheet_id: str, gid: int) -> str:
    return EXPORT_URL.format(spreadsheet_id=spreadsheet_id) + f"?format=pdf&gid={gid}&portrait=true&fitw=true"


def fetch_pdf(
    url: str,
    access_token: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = 60,
) -> bytes:
    """Download one exported tab. A single attempt; callers decide what a failure means."""
    http = session or requests
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        response = http.get(url, headers=headers, timeout=timeout)
    except requests.exceptions.RequestException as err:
        raise ExportRequestError(f"Export request failed: {err}") from err

    if response.status_code != 200:
        raise ExportRequestError(f"Export failed with a status code of {response.status_code}")

    body = response.content
    if not body.startswith(PDF_MAGIC):
        # Expired sessions get redirected to an HTML sign-in page with a 200.
        raise ExportRequestError("Export did not return a PDF document")
    logger.debug("Fetched %s bytes from %s", len(body), url)
    return body
