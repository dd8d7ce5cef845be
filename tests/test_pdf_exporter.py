from types import SimpleNamespace

import pytest
import requests

import export_query as eq
from errors import AuthError, ExportError
from repos.pdf_exporter import PdfExporter

PDF_BYTES = b"%PDF-1.4\n%fake dashboard\n"


class FakeSession:
    def __init__(self, status_code=200, content=PDF_BYTES, exc=None):
        self.status_code = status_code
        self.content = content
        self.exc = exc
        self.requests = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers, timeout))
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(status_code=self.status_code, content=self.content)


def make_exporter(sheets, tmp_path, session, token_provider=lambda: "tok-123"):
    return PdfExporter(sheets, token_provider, str(tmp_path / "out"), session=session, timeout=5)


class TestExportQuery:
    def test_build_export_url(self):
        url = eq.build_export_url("abc", 42)
        assert url == "https://docs.google.com/spreadsheets/d/abc/export?format=pdf&gid=42&portrait=true&fitw=true"

    def test_html_body_is_rejected(self):
        session = FakeSession(content=b"<html>Sign in</html>")
        with pytest.raises(eq.ExportRequestError, match="PDF"):
            eq.fetch_pdf("https://example.test", "tok", session=session)


class TestPdfExporter:
    def test_writes_pdf(self, sheets, tmp_path):
        session = FakeSession()
        path = make_exporter(sheets, tmp_path, session).export("sheet-1", "Red_Jo.pdf")

        assert path.endswith("Red_Jo.pdf")
        assert (tmp_path / "out" / "Red_Jo.pdf").read_bytes() == PDF_BYTES
        url, headers, timeout = session.requests[0]
        assert "gid=42" in url and "/d/sheet-1/" in url
        assert headers == {"Authorization": "Bearer tok-123"}
        assert timeout == 5

    def test_path_separators_in_names(self, sheets, tmp_path):
        make_exporter(sheets, tmp_path, FakeSession()).export("sheet-1", "U/18_Jo.pdf")
        assert (tmp_path / "out" / "U-18_Jo.pdf").exists()

    def test_http_error_status(self, sheets, tmp_path):
        with pytest.raises(ExportError, match="403"):
            make_exporter(sheets, tmp_path, FakeSession(status_code=403)).export("sheet-1", "Red_Jo.pdf")
        assert not (tmp_path / "out" / "Red_Jo.pdf").exists()

    def test_network_error(self, sheets, tmp_path):
        session = FakeSession(exc=requests.exceptions.ConnectionError("reset by peer"))
        with pytest.raises(ExportError, match="reset by peer"):
            make_exporter(sheets, tmp_path, session).export("sheet-1", "Red_Jo.pdf")

    def test_missing_dashboard(self, sheets, tmp_path):
        del sheets.tabs["Dashboard"]
        session = FakeSession()
        with pytest.raises(ExportError, match="Dashboard"):
            make_exporter(sheets, tmp_path, session).export("sheet-1", "Red_Jo.pdf")
        assert session.requests == []

    def test_signed_out(self, sheets, tmp_path):
        def no_token():
            raise AuthError("Not signed in")

        with pytest.raises(ExportError, match="Not signed in"):
            make_exporter(sheets, tmp_path, FakeSession(), token_provider=no_token).export("sheet-1", "Red_Jo.pdf")
