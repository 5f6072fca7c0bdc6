from __future__ import annotations

import logging
from contextlib import contextmanager

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from todo_backend import repositories
from todo_backend.auth import require_api_key
from todo_backend.errors import (
    OperationFailedError,
    QuotaExceededError,
    SheetsQuotaError,
    TodoApiError,
    ValidationFailedError,
)
from todo_backend.schemas import TaskCreate, TaskListResponse, TaskPatch, TaskResponse

logger = logging.getLogger(__name__)

router = APIRouter()

DATE_EXAMPLE = "12/25/2024"


@contextmanager
def _failure(label: str):
    try:
        yield
    except TodoApiError:
        raise
    except SheetsQuotaError as exc:
        logger.warning("%s: %s", label, exc)
        raise QuotaExceededError(label, details=f"Quota exceeded: {exc.message}") from exc
    except Exception as exc:
        logger.exception("%s: %s", label, exc)
        raise OperationFailedError(label, details=str(exc)) from exc


@router.get("/api/tasks")
async def list_tasks(date: str | None = Query(default=None)):
    if not date:
        raise ValidationFailedError(f"Date parameter is required. Use: /api/tasks?date={DATE_EXAMPLE}")
    with _failure("Failed to fetch tasks"):
        tasks = await repositories.list_tasks(date)
    body = TaskListResponse(date=date, tasks=tasks, count=len(tasks))
    return body.model_dump(by_alias=True)


@router.post("/api/tasks", dependencies=[Depends(require_api_key)])
async def create_task(payload: TaskCreate):
    missing = [
        name
        for name, value in (("text", payload.text), ("date", payload.date))
        if not (value or "").strip()
    ]
    if missing:
        raise ValidationFailedError(
            f"Missing required field(s): {', '.join(missing)}",
            missing=missing,
            example={"text": "Task text", "date": DATE_EXAMPLE},
        )
    with _failure("Failed to create task"):
        task = await repositories.create_task(
            payload.text,
            payload.date.strip(),
            completed=payload.completed is True,
            time_spent=payload.time_spent,
        )
    body = TaskResponse(task=task)
    return JSONResponse(status_code=201, content=body.model_dump(by_alias=True))


@router.patch("/api/tasks/{task_id}", dependencies=[Depends(require_api_key)])
async def patch_task(task_id: str, payload: TaskPatch):
    changes = payload.changes()
    if not changes:
        raise ValidationFailedError(
            "At least one field (text, completed, date, or timeSpent) must be provided for update"
        )
    with _failure("Failed to update task"):
        task = await repositories.update_task(task_id, changes)
    return TaskResponse(task=task).model_dump(by_alias=True)


@router.delete("/api/tasks/{task_id}", dependencies=[Depends(require_api_key)])
async def delete_task(task_id: str):
    with _failure("Failed to delete task"):
        await repositories.delete_task(task_id)
    return {"success": True, "message": "Task deleted successfully"}
