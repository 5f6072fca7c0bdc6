from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from todo_backend.services.diagnostics import collect_diagnostics

router = APIRouter()


@router.get("/api/tasks/test")
async def sheets_diagnostics():
    report, status_code = await collect_diagnostics()
    return JSONResponse(status_code=status_code, content=report)
