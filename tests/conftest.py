"""Shared fixtures: an in-memory sheet standing in for the Sheets REST API."""
import re

import pytest
from fastapi.testclient import TestClient

from todo_backend.errors import SheetsApiError
from todo_backend.services import google_sheets_service
from todo_backend.settings import reset_settings

HEADER = ["id", "date", "text", "completed", "created_at", "timeSpent"]

_RANGE_RE = re.compile(r"!A(\d+)?:[A-Z](\d+)?$")


class FakeSheetsClient:
    """Rows live in ``self.rows``; index 0 is the header row (sheet row 1)."""

    def __init__(self, rows=None, sheet_title="Sheet1", sheet_id=0):
        self.rows = [list(HEADER)] + [list(row) for row in (rows or [])]
        self.sheet_title = sheet_title
        self.sheet_id = sheet_id
        self.fail_with = None
        self.calls = []

    def _maybe_fail(self, operation):
        self.calls.append(operation)
        if self.fail_with is not None:
            raise self.fail_with

    def _row_bounds(self, range_):
        match = _RANGE_RE.search(range_)
        start = int(match.group(1)) if match and match.group(1) else 1
        end = int(match.group(2)) if match and match.group(2) else len(self.rows)
        return start, end

    async def get_values(self, spreadsheet_id, range_):
        self._maybe_fail("get_values")
        start, end = self._row_bounds(range_)
        return [list(row) for row in self.rows[start - 1:end]]

    async def append_values(self, spreadsheet_id, range_, values):
        self._maybe_fail("append_values")
        self.rows.extend(list(row) for row in values)
        return {"updates": {"updatedRows": len(values)}}

    async def update_values(self, spreadsheet_id, range_, values):
        self._maybe_fail("update_values")
        start, _ = self._row_bounds(range_)
        self.rows[start - 1] = list(values[0])
        return {"updatedRows": 1}

    async def get_spreadsheet(self, spreadsheet_id):
        self._maybe_fail("get_spreadsheet")
        if spreadsheet_id == "missing":
            raise SheetsApiError(404, "Requested entity was not found.")
        return {
            "properties": {"title": "Daily cards"},
            "sheets": [{"properties": {"title": self.sheet_title, "sheetId": self.sheet_id}}],
        }

    async def batch_update(self, spreadsheet_id, requests):
        self._maybe_fail("batch_update")
        for request in requests:
            span = request["deleteDimension"]["range"]
            del self.rows[span["startIndex"]:span["endIndex"]]
        return {"replies": [{} for _ in requests]}


@pytest.fixture
def sheet(monkeypatch):
    for name in google_sheets_service.CREDENTIAL_VARIABLES + ("API_KEY", "GOOGLE_SHEETS_SHEET_NAME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "test-spreadsheet")
    reset_settings()
    fake = FakeSheetsClient()
    google_sheets_service.set_sheets_client(fake)
    yield fake
    google_sheets_service.set_sheets_client(None)
    reset_settings()


@pytest.fixture
def client(sheet):
    from todo_backend.main import create_app

    return TestClient(create_app())
