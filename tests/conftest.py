from types import SimpleNamespace

import pytest
from googleapiclient.errors import HttpError


def http_error(status: int = 500, reason: str = "Backend Error") -> HttpError:
    return HttpError(SimpleNamespace(status=status, reason=reason), b"")


class FakeSheets:
    """Stands in for SheetsService: tabs by title, values by A1 range, batchUpdate requests in order."""
    def __init__(self, tabs=None, values=None):
        self.tabs = dict(tabs if tabs is not None else {"Profiles": 0, "Dashboard": 42})
        self.values = dict(values or {})
        self.calls = []
        self.fail = set()
        self.requests = []

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise http_error()

    def sheet_ids(self, spreadsheet_id):
        self._check("sheet_ids")
        return dict(self.tabs)

    def get_sheet_id(self, spreadsheet_id, title):
        return self.sheet_ids(spreadsheet_id).get(title)

    def get_values(self, spreadsheet_id, range_):
        self._check("get_values")
        return self.values.get(range_, [])

    def update_values(self, spreadsheet_id, range_, values):
        self._check("update_values")
        self.values[range_] = values

    def batch_update(self, spreadsheet_id, requests):
        self._check("batch_update")
        self.requests.extend(requests)
        return {}

    def append_values(self, spreadsheet_id, range_, values):
        self._check("append_values")
        self.values.setdefault(range_, []).extend(values)

    def add_sheet(self, spreadsheet_id, title, *, rows=1000, columns=26):
        self._check("add_sheet")
        self.tabs[title] = 100 + len(self.tabs)


@pytest.fixture
def sheets():
    return FakeSheets()
