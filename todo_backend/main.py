from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_backend.errors import TodoApiError, ValidationFailedError
from todo_backend.routes import diagnostics, tasks
from todo_backend.settings import get_settings


def create_app() -> FastAPI:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    app = FastAPI(title="Analog Cards API", version="0.1.0")

    app.include_router(diagnostics.router)
    app.include_router(tasks.router)

    @app.exception_handler(TodoApiError)
    async def _todo_api_error_handler(request: Request, exc: TodoApiError):
        if exc.status_code >= 500:
            logging.getLogger("todo_backend").error("%s %s failed: %s", request.method, request.url.path, exc.payload())
        return JSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in exc.errors()
        ]
        error = ValidationFailedError(details=details)
        return JSONResponse(status_code=error.status_code, content=error.payload())

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("todo_backend").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"error": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
