"""Connectivity checks for the spreadsheet backing store."""
from __future__ import annotations

import logging

from todo_backend.errors import SheetsApiError
from todo_backend.repositories import utc_now_iso
from todo_backend.services import google_sheets_service
from todo_backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SAMPLE_RANGE = "A1:E10"


def _truncate(value: str, length: int = 10) -> str:
    return f"{value[:length]}..."


def _environment_checks(settings: Settings) -> dict:
    return {
        "hasSpreadsheetId": bool(settings.spreadsheet_id),
        "hasCredentialsJson": bool(settings.credentials_json),
        "hasCredentialsBase64": bool(settings.credentials_base64),
        "hasCredentialsPath": bool(settings.credentials_path),
        "spreadsheetId": _truncate(settings.spreadsheet_id) if settings.spreadsheet_id else "NOT SET",
        "sheetName": settings.sheet_name if settings.sheet_name else "Sheet1 (default)",
    }


async def collect_diagnostics(settings: Settings | None = None) -> tuple[dict, int]:
    """Run the checks in order, stopping at the first one that makes later ones pointless.

    Returns the report and the HTTP status to answer with.
    """
    settings = settings or get_settings()
    report = {"timestamp": utc_now_iso(), "checks": {}, "errors": [], "warnings": []}
    checks = report["checks"]
    errors = report["errors"]

    checks["environmentVariables"] = _environment_checks(settings)
    if not settings.spreadsheet_id:
        errors.append("GOOGLE_SHEETS_SPREADSHEET_ID is not set")
    if not settings.has_credentials:
        errors.append(
            "No credentials found. Set one of: "
            + ", ".join(google_sheets_service.CREDENTIAL_VARIABLES)
        )
        return report, 500

    try:
        client = google_sheets_service.get_sheets_client()
    except Exception as exc:
        logger.warning("Sheets client initialization failed: %s", exc)
        checks["clientInitialization"] = {"status": "failed", "error": str(exc)}
        errors.append("Failed to initialize Google Sheets client")
        return report, 500
    checks["clientInitialization"] = {
        "status": "success",
        "message": "Google Sheets client initialized successfully",
    }
    if not settings.spreadsheet_id:
        return report, 500

    spreadsheet_id = settings.spreadsheet_id
    sheet_name = settings.sheet_name_or_default
    try:
        metadata = await client.get_spreadsheet(spreadsheet_id)
        sheets = [
            {
                "title": (sheet.get("properties") or {}).get("title"),
                "sheetId": (sheet.get("properties") or {}).get("sheetId"),
            }
            for sheet in metadata.get("sheets") or []
        ]
        checks["spreadsheetAccess"] = {
            "status": "success",
            "title": (metadata.get("properties") or {}).get("title") or "Unknown",
            "spreadsheetId": _truncate(spreadsheet_id),
            "sheets": sheets,
        }
        titles = [sheet["title"] for sheet in sheets]
        if sheet_name not in titles:
            available = ", ".join(str(title) for title in titles) or "none"
            report["warnings"].append(f'Sheet "{sheet_name}" not found. Available sheets: {available}')

        sample_range = f"{sheet_name}!{SAMPLE_RANGE}"
        rows = await client.get_values(spreadsheet_id, sample_range)
        checks["dataRead"] = {
            "status": "success",
            "range": sample_range,
            "rowsFound": len(rows),
            "sampleData": rows[:3],
        }
        report["summary"] = {
            "status": "success",
            "message": "All checks passed! Google Sheets connection is working.",
        }
    except SheetsApiError as exc:
        checks["spreadsheetAccess"] = {"status": "failed", "error": exc.message, "code": exc.status_code}
        if exc.status_code == 403:
            errors.append(
                "Permission denied. Make sure the spreadsheet is shared with the service account email."
            )
        elif exc.status_code == 404:
            errors.append("Spreadsheet not found. Check that GOOGLE_SHEETS_SPREADSHEET_ID is correct.")
        else:
            errors.append(f"API error: {exc.message}")
        report["summary"] = {"status": "failed", "message": "Failed to access spreadsheet"}
    except Exception as exc:
        logger.exception("Unexpected error during diagnostics: %s", exc)
        errors.append(str(exc) or "Unknown error")
        report["summary"] = {"status": "error", "message": "Unexpected error during diagnostics"}

    return report, 500 if errors else 200
