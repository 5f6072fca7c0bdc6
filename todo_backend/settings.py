from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    spreadsheet_id: str | None = Field(None, alias="GOOGLE_SHEETS_SPREADSHEET_ID")
    sheet_name: str = Field("Sheet1", alias="GOOGLE_SHEETS_SHEET_NAME")

    credentials_base64: str | None = Field(None, alias="GOOGLE_SHEETS_CREDENTIALS_BASE64")
    credentials_json: str | None = Field(None, alias="GOOGLE_SHEETS_CREDENTIALS_JSON")
    credentials_path: str | None = Field(None, alias="GOOGLE_SHEETS_CREDENTIALS")

    api_key: str | None = Field(None, alias="API_KEY")
    log_level: str = Field("INFO", alias="BACKEND_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def has_credentials(self) -> bool:
        return bool(self.credentials_base64 or self.credentials_json or self.credentials_path)

    @property
    def sheet_name_or_default(self) -> str:
        return (self.sheet_name or "").strip() or "Sheet1"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("BACKEND_DEBUG_SETTINGS"):
    print(get_settings())
