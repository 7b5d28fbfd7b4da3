"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class SiteVisitColumns:
    """
    Header vocabulary agreed with the upstream site-visit form.

    Lookups against these labels ignore case and whitespace differences, but
    the meaning of each label is fixed by the form.
    """

    timestamp: str = "Timestamp"
    lead_source: str = "How did you come to Know about us"
    handled_by: str = "Site Visit handled by"
    salesperson: str = "Sales person"
    income: str = "Current annual income"
    configuration: str = "Configurations"
    industry: str = "I am working in"
    requirements: str = "Requirements"
    visit_remarks: str = "site visit Remarks"
    follow_up_remarks: str = "Follow up remarks"

    @property
    def handler_columns(self) -> tuple[str, str]:
        return (self.handled_by, self.salesperson)

    @property
    def remark_columns(self) -> tuple[str, str]:
        return (self.visit_remarks, self.follow_up_remarks)


@dataclass(frozen=True)
class SheetSettings:
    """
    Google Sheets source settings.
    """

    spreadsheet_id: str
    sheet_name: str = "site visits"
    last_column: str = "X"
    service_account_json: str | None = None
    service_account_path: str | None = None
    timeout_seconds: float = 30.0

    @property
    def range_spec(self) -> str:
        safe_name = self.sheet_name.replace("'", "''")
        return f"'{safe_name}'!A1:{self.last_column}"


@dataclass(frozen=True)
class APISettings:
    """
    HTTP surface settings.
    """

    title: str = "Site Visit Analytics API"
    host: str = "0.0.0.0"
    port: int = 8080
    cors_allow_origins: tuple[str, ...] = ("*",)
    default_source: str = "social media"


@lru_cache(maxsize=1)
def get_sheet_settings() -> SheetSettings:
    """
    Return cached spreadsheet settings from environment variables.
    """

    return SheetSettings(
        spreadsheet_id=_get_str_env("SHEET_ID", ""),
        sheet_name=_get_str_env("SHEET_NAME", "site visits"),
        last_column=_get_str_env("SHEET_RANGE_END_COLUMN", "X").upper(),
        service_account_json=_get_optional_str_env("GOOGLE_SERVICE_KEY"),
        service_account_path=_get_optional_str_env("GOOGLE_SERVICE_KEY_PATH"),
        timeout_seconds=max(1.0, _get_float_env("SHEETS_HTTP_TIMEOUT_SECONDS", 30.0)),
    )


@lru_cache(maxsize=1)
def get_api_settings() -> APISettings:
    """
    Return cached HTTP settings from environment variables.
    """

    return APISettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=max(1, _get_int_env("PORT", 8080)),
        cors_allow_origins=_get_list_env("CORS_ALLOW_ORIGINS", ("*",)),
        default_source=_get_str_env("DEFAULT_LEAD_SOURCE", "social media"),
    )


@lru_cache(maxsize=1)
def get_site_visit_columns() -> SiteVisitColumns:
    return SiteVisitColumns()
