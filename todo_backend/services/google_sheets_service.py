from __future__ import annotations

import asyncio
import base64
import json
import logging
from pathlib import Path
from urllib.parse import quote

import httpx
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from todo_backend.errors import ConfigurationError, SheetsApiError, SheetsQuotaError
from todo_backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SHEETS_API = "https://sheets.googleapis.com/v4/spreadsheets"
SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

CREDENTIAL_VARIABLES = (
    "GOOGLE_SHEETS_CREDENTIALS_BASE64",
    "GOOGLE_SHEETS_CREDENTIALS_JSON",
    "GOOGLE_SHEETS_CREDENTIALS",
)


def load_credentials_info(settings: Settings | None = None) -> tuple[dict, str]:
    """Resolve the service-account JSON, returning it with the variable it came from.

    Order: base64-encoded JSON, raw JSON, then a path to a JSON file.
    """
    settings = settings or get_settings()
    if settings.credentials_base64:
        try:
            decoded = base64.b64decode(settings.credentials_base64).decode("utf-8")
            info = json.loads(decoded)
        except Exception as exc:
            logger.error("Failed to decode base64 credentials: %s", exc)
            raise ConfigurationError(
                "GOOGLE_SHEETS_CREDENTIALS_BASE64 is not valid base64-encoded JSON. "
                "Please check your environment variable."
            ) from exc
        method = "GOOGLE_SHEETS_CREDENTIALS_BASE64"
    elif settings.credentials_json:
        raw = settings.credentials_json
        try:
            info = json.loads(raw)
            method = "GOOGLE_SHEETS_CREDENTIALS_JSON"
        except json.JSONDecodeError as exc:
            cleaned = " ".join(raw.replace("\n", "").split())
            try:
                info = json.loads(cleaned)
            except json.JSONDecodeError:
                logger.error("Failed to parse JSON credentials: %s", exc)
                raise ConfigurationError(
                    f"GOOGLE_SHEETS_CREDENTIALS_JSON is not valid JSON. Error: {exc}"
                ) from exc
            method = "GOOGLE_SHEETS_CREDENTIALS_JSON (cleaned)"
    elif settings.credentials_path:
        path = Path(settings.credentials_path).expanduser().resolve()
        try:
            info = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read credentials file: %s", exc)
            raise ConfigurationError(f"Failed to read credentials file at {path}: {exc}") from exc
        method = "GOOGLE_SHEETS_CREDENTIALS (file path)"
    else:
        raise ConfigurationError(
            "No credentials found. Set one of: " + ", ".join(CREDENTIAL_VARIABLES)
        )
    _validate_credentials(info)
    return info, method


def _validate_credentials(info) -> None:
    if not isinstance(info, dict) or info.get("type") != "service_account":
        raise ConfigurationError("Invalid credentials: must be a service account JSON")
    if not info.get("client_email"):
        raise ConfigurationError("Invalid credentials: missing client_email")
    if not info.get("private_key"):
        raise ConfigurationError("Invalid credentials: missing private_key")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
        return payload.get("error", {}).get("message") or payload.get("message") or response.text
    except Exception:
        return response.text


def _raise_for_status(response: httpx.Response, operation: str) -> None:
    if response.status_code < 400:
        return
    message = _error_message(response)
    logger.warning("Sheets %s failed (%s): %s", operation, response.status_code, message)
    if response.status_code == 429 or "Quota exceeded" in message:
        raise SheetsQuotaError(response.status_code, message)
    raise SheetsApiError(response.status_code, message)


class SheetsClient:
    """Minimal async client for the Sheets v4 REST endpoints the task store needs."""

    def __init__(self, credentials, timeout: float = 20):
        self._credentials = credentials
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "SheetsClient":
        info, method = load_credentials_info(settings)
        credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        logger.info("Google Sheets client initialized using: %s", method)
        logger.info("Service account: %s", info.get("client_email"))
        return cls(credentials)

    async def _headers(self) -> dict:
        if not self._credentials.valid:
            await asyncio.to_thread(self._credentials.refresh, GoogleAuthRequest())
        return {"Authorization": f"Bearer {self._credentials.token}"}

    async def _request(self, method: str, url: str, operation: str, **kwargs) -> dict:
        headers = await self._headers()
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.request(method, url, headers=headers, **kwargs)
        _raise_for_status(response, operation)
        if not response.content:
            return {}
        return response.json()

    async def get_values(self, spreadsheet_id: str, range_: str) -> list[list[str]]:
        endpoint = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}/values/{quote(range_, safe='')}"
        payload = await self._request("GET", endpoint, "values.get")
        return payload.get("values") or []

    async def append_values(self, spreadsheet_id: str, range_: str, values: list[list[str]]) -> dict:
        endpoint = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}/values/{quote(range_, safe='')}:append"
        params = {"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"}
        return await self._request("POST", endpoint, "values.append", params=params, json={"values": values})

    async def update_values(self, spreadsheet_id: str, range_: str, values: list[list[str]]) -> dict:
        endpoint = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}/values/{quote(range_, safe='')}"
        params = {"valueInputOption": "USER_ENTERED"}
        return await self._request(
            "PUT",
            endpoint,
            "values.update",
            params=params,
            json={"range": range_, "values": values},
        )

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict:
        endpoint = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}"
        return await self._request("GET", endpoint, "spreadsheets.get")

    async def batch_update(self, spreadsheet_id: str, requests: list[dict]) -> dict:
        endpoint = f"{SHEETS_API}/{quote(spreadsheet_id, safe='')}:batchUpdate"
        return await self._request("POST", endpoint, "spreadsheets.batchUpdate", json={"requests": requests})


_client: SheetsClient | None = None


def get_sheets_client() -> SheetsClient:
    global _client
    if _client is None:
        _client = SheetsClient.from_settings()
    return _client


def set_sheets_client(client: SheetsClient | None) -> None:
    global _client
    _client = client


def require_spreadsheet_id(settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    spreadsheet_id = (settings.spreadsheet_id or "").strip()
    if not spreadsheet_id:
        raise ConfigurationError(
            "Spreadsheet ID not configured",
            hint="Set GOOGLE_SHEETS_SPREADSHEET_ID to the id from the sheet URL.",
        )
    return spreadsheet_id
