from __future__ import annotations

from typing import Any


class TodoApiError(Exception):
    """Error that maps directly onto an HTTP response body."""

    status_code = 500
    error = "Internal error"

    def __init__(self, error: str | None = None, **extra: Any):
        self.error = error or self.error
        self.extra = {key: value for key, value in extra.items() if value is not None}
        super().__init__(self.error)

    def payload(self) -> dict:
        return {"error": self.error, **self.extra}


class ValidationFailedError(TodoApiError):
    status_code = 400
    error = "Invalid request"


class UnauthorizedError(TodoApiError):
    status_code = 401
    error = "Unauthorized"


class TaskNotFoundError(TodoApiError):
    status_code = 404
    error = "Task not found"


class SheetNotFoundError(TodoApiError):
    status_code = 404
    error = "Sheet not found"


class QuotaExceededError(TodoApiError):
    status_code = 429
    error = "Quota exceeded"


class ConfigurationError(TodoApiError):
    status_code = 500
    error = "Configuration error"


class OperationFailedError(TodoApiError):
    status_code = 500
    error = "Operation failed"


class SheetsApiError(RuntimeError):
    """Raised when the Google Sheets REST API answers with an error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Sheets API error ({status_code}): {message}")


class SheetsQuotaError(SheetsApiError):
    pass
