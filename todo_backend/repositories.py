from __future__ import annotations

import random
import string
import time
from datetime import datetime, timezone

from todo_backend.errors import SheetNotFoundError, TaskNotFoundError
from todo_backend.services import google_sheets_service
from todo_backend.settings import get_settings

TASK_COLUMNS = ["id", "date", "text", "completed", "created_at", "timeSpent"]
FIRST_DATA_ROW = 2
LAST_DATA_ROW = 1000

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_task_id(now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(9))
    return f"task-{now_ms}-{suffix}"


def utc_now_iso() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _bool_cell(value: bool) -> str:
    return "true" if value else "false"


def _pad_row(row) -> list[str]:
    padded = [("" if cell is None else str(cell)) for cell in (row or [])]
    while len(padded) < len(TASK_COLUMNS):
        padded.append("")
    return padded


def row_to_task(row) -> dict:
    cells = _pad_row(row)
    return {
        "id": cells[0],
        "date": cells[1],
        "text": cells[2],
        "completed": cells[3] == "true",
        "created_at": cells[4],
        "timeSpent": cells[5],
    }


def task_to_row(task: dict) -> list[str]:
    time_spent = task.get("timeSpent")
    return [
        task.get("id") or "",
        task.get("date") or "",
        task.get("text") or "",
        _bool_cell(task.get("completed") is True),
        task.get("created_at") or "",
        "" if time_spent is None else str(time_spent),
    ]


def _sheet_name() -> str:
    return get_settings().sheet_name_or_default


def _data_range() -> str:
    return f"{_sheet_name()}!A{FIRST_DATA_ROW}:F{LAST_DATA_ROW}"


async def read_rows() -> list[list[str]]:
    spreadsheet_id = google_sheets_service.require_spreadsheet_id()
    client = google_sheets_service.get_sheets_client()
    return await client.get_values(spreadsheet_id, _data_range())


async def list_tasks(day: str) -> list[dict]:
    rows = await read_rows()
    return [row_to_task(row) for row in rows if row and len(row) >= 2 and row[1] == day]


async def find_row(task_id: str) -> tuple[int, list[str]]:
    """Linear scan for the row holding ``task_id``; returns (sheet row number, cells)."""
    rows = await read_rows()
    for index, row in enumerate(rows):
        if row and row[0] == task_id:
            return index + FIRST_DATA_ROW, _pad_row(row)
    raise TaskNotFoundError()


async def create_task(text: str, day: str, completed: bool = False, time_spent=None) -> dict:
    spreadsheet_id = google_sheets_service.require_spreadsheet_id()
    client = google_sheets_service.get_sheets_client()
    task = {
        "id": new_task_id(),
        "date": day,
        "text": text.strip(),
        "completed": completed is True,
        "created_at": utc_now_iso(),
        "timeSpent": "" if time_spent is None else str(time_spent),
    }
    await client.append_values(spreadsheet_id, f"{_sheet_name()}!A:F", [task_to_row(task)])
    return task


async def update_task(task_id: str, patch: dict) -> dict:
    row_number, current = await find_row(task_id)
    task = row_to_task(current)
    if "date" in patch:
        task["date"] = patch["date"]
    if "text" in patch:
        task["text"] = str(patch["text"]).strip()
    if "completed" in patch:
        task["completed"] = patch["completed"] is True
    if "timeSpent" in patch:
        task["timeSpent"] = str(patch["timeSpent"])
    if not task["created_at"]:
        task["created_at"] = utc_now_iso()

    spreadsheet_id = google_sheets_service.require_spreadsheet_id()
    client = google_sheets_service.get_sheets_client()
    update_range = f"{_sheet_name()}!A{row_number}:F{row_number}"
    await client.update_values(spreadsheet_id, update_range, [task_to_row(task)])
    return task


async def _sheet_id(spreadsheet_id: str) -> int:
    client = google_sheets_service.get_sheets_client()
    metadata = await client.get_spreadsheet(spreadsheet_id)
    sheet_name = _sheet_name()
    for sheet in metadata.get("sheets") or []:
        properties = sheet.get("properties") or {}
        if properties.get("title") == sheet_name:
            sheet_id = properties.get("sheetId")
            if sheet_id is not None:
                return sheet_id
    raise SheetNotFoundError()


async def delete_task(task_id: str) -> None:
    row_number, _ = await find_row(task_id)
    spreadsheet_id = google_sheets_service.require_spreadsheet_id()
    sheet_id = await _sheet_id(spreadsheet_id)
    client = google_sheets_service.get_sheets_client()
    await client.batch_update(
        spreadsheet_id,
        [
            {
                "deleteDimension": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "ROWS",
                        "startIndex": row_number - 1,
                        "endIndex": row_number,
                    }
                }
            }
        ],
    )
