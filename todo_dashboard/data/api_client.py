import os
from typing import Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from todo_dashboard.data.models import Task

_SECRET_GETTER = None

QUOTA_MARKER = "Quota exceeded"


class ApiError(RuntimeError):
    def __init__(self, status_code, message, payload=None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"API error {status_code}: {message}")


class QuotaExceededError(ApiError):
    pass


def _build_session():
    session = requests.Session()
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET", "POST", "PUT", "PATCH", "DELETE"),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_SESSION = _build_session()


def configure(secret_getter):
    global _SECRET_GETTER
    _SECRET_GETTER = secret_getter


def _get_secret(path, default=None):
    if _SECRET_GETTER is None:
        return default
    return _SECRET_GETTER(path, default)


def api_base_url():
    return (
        _get_secret(("app", "API_BASE_URL"))
        or _get_secret(("API_BASE_URL",))
        or os.getenv("API_BASE_URL")
        or ""
    )


def api_key():
    return (
        _get_secret(("app", "API_KEY"))
        or _get_secret(("API_KEY",))
        or os.getenv("API_KEY")
        or ""
    )


def is_enabled():
    return bool(api_base_url())


def _error_from_response(response) -> ApiError:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        parts = [str(payload.get(key)) for key in ("error", "message", "details") if payload.get(key)]
        message = " - ".join(parts) or response.reason
    else:
        message = response.text or response.reason
    if response.status_code == 429 or QUOTA_MARKER in str(message):
        return QuotaExceededError(response.status_code, message, payload)
    return ApiError(response.status_code, message, payload)


def request(method: str, path: str, params: dict | None = None, json: dict | None = None, timeout: int = 10) -> Any:
    base = api_base_url().rstrip("/")
    if not base:
        raise RuntimeError("API_BASE_URL not configured")
    headers = {}
    key = api_key()
    if key:
        headers["Authorization"] = f"Bearer {key}"
    url = f"{base}{path}"
    response = _SESSION.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
    if not response.ok:
        raise _error_from_response(response)
    if response.status_code == 204:
        return None
    return response.json()


def get_tasks_for_date(day: str) -> list[Task]:
    payload = request("GET", "/api/tasks", params={"date": day})
    return [Task.from_payload(item) for item in (payload or {}).get("tasks") or []]


def create_task(text: str, day: str, completed: bool = False, time_spent=None) -> Task:
    body = {"text": text, "date": day, "completed": completed}
    if time_spent is not None:
        body["timeSpent"] = time_spent
    payload = request("POST", "/api/tasks", json=body)
    return Task.from_payload(payload["task"])


def update_task(task_id: str, updates: dict) -> Task:
    payload = request("PATCH", f"/api/tasks/{quote(task_id, safe='')}", json=updates)
    return Task.from_payload(payload["task"])


def delete_task(task_id: str) -> None:
    request("DELETE", f"/api/tasks/{quote(task_id, safe='')}")
