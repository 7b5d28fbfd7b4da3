"""
app/connectors/google_sheets_connector.py

Read-only Google Sheets grid connector.

Credentials come from a service-account key, either inline JSON
(``GOOGLE_SERVICE_KEY``) or a key file (``GOOGLE_SERVICE_KEY_PATH``). The
discovery client is built once on first use and reused; reads are not retried.
"""

from __future__ import annotations

import json
import logging
import threading
from functools import lru_cache
from pathlib import Path
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.config import SheetSettings, get_sheet_settings
from app.connectors.base import BaseGridConnector, GridFetchError, RawGrid

logger = logging.getLogger(__name__)


def load_service_account_credentials(
    settings: SheetSettings,
    scopes: list[str],
) -> service_account.Credentials:
    """
    Build service-account credentials from inline JSON or a key file.

    Raises RuntimeError when neither is configured or the key is unreadable.
    """

    if settings.service_account_json:
        try:
            payload = json.loads(settings.service_account_json)
        except ValueError as exc:
            raise RuntimeError("GOOGLE_SERVICE_KEY is not valid JSON.") from exc
        try:
            return service_account.Credentials.from_service_account_info(payload, scopes=scopes)
        except (ValueError, KeyError) as exc:
            raise RuntimeError("GOOGLE_SERVICE_KEY is not a service-account key.") from exc

    if settings.service_account_path:
        key_path = Path(settings.service_account_path)
        if not key_path.exists():
            raise RuntimeError(f"Google service-account key file not found: {key_path}")
        try:
            return service_account.Credentials.from_service_account_file(str(key_path), scopes=scopes)
        except (ValueError, KeyError) as exc:
            raise RuntimeError(f"Google service-account key file is invalid: {key_path}") from exc

    raise RuntimeError("No Google credentials configured. Set GOOGLE_SERVICE_KEY or GOOGLE_SERVICE_KEY_PATH.")


class GoogleSheetsConnector(BaseGridConnector):
    """
    Fetches a range from one spreadsheet through the Sheets v4 API.
    """

    SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
    source = "google_sheets"

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        credentials: Any | None = None,
        service: Any | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        if not spreadsheet_id.strip():
            raise ValueError("spreadsheet_id must not be empty.")
        if credentials is None and service is None:
            raise ValueError("Either credentials or a prebuilt service is required.")
        self.spreadsheet_id = spreadsheet_id.strip()
        self._credentials = credentials
        self._service = service
        self._timeout_seconds = timeout_seconds
        self._service_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: SheetSettings) -> "GoogleSheetsConnector":
        credentials = load_service_account_credentials(settings, cls.SCOPES)
        return cls(
            spreadsheet_id=settings.spreadsheet_id,
            credentials=credentials,
            timeout_seconds=settings.timeout_seconds,
        )

    def _authorized_http(self) -> AuthorizedHttp:
        return AuthorizedHttp(self._credentials, http=httplib2.Http(timeout=self._timeout_seconds))

    def _sheets_service(self) -> Any:
        with self._service_lock:
            if self._service is None:
                self._service = build("sheets", "v4", http=self._authorized_http(), cache_discovery=False)
            return self._service

    def fetch_grid(self, range_spec: str) -> RawGrid:
        """
        Read *range_spec* row-major and return the raw ``values`` grid.
        """

        try:
            request = (
                self._sheets_service()
                .spreadsheets()
                .values()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    range=range_spec,
                    majorDimension="ROWS",
                )
            )
            # httplib2 connections are not thread-safe; each read gets its own.
            if self._credentials is None:
                payload = request.execute()
            else:
                payload = request.execute(http=self._authorized_http())
        except HttpError as exc:
            status_code = getattr(exc.resp, "status", None)
            logger.warning(
                "Sheet read failed spreadsheet=%s range=%s status=%s",
                self.spreadsheet_id,
                range_spec,
                status_code,
            )
            raise GridFetchError(
                f"{self.source}: read failed with HTTP {status_code}.",
                range_spec=range_spec,
                status_code=int(status_code) if status_code else None,
            ) from exc
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as exc:
            logger.warning(
                "Sheet read failed spreadsheet=%s range=%s error=%s",
                self.spreadsheet_id,
                range_spec,
                exc,
            )
            raise GridFetchError(f"{self.source}: read failed: {exc}", range_spec=range_spec) from exc

        values = payload.get("values", []) if isinstance(payload, dict) else []
        if not isinstance(values, list):
            raise GridFetchError(f"{self.source}: unexpected response shape.", range_spec=range_spec)

        grid: RawGrid = [list(row) if isinstance(row, list) else [] for row in values]
        logger.debug(
            "Sheet read spreadsheet=%s range=%s rows=%d",
            self.spreadsheet_id,
            range_spec,
            len(grid),
        )
        return grid


@lru_cache(maxsize=1)
def get_sheets_connector() -> GoogleSheetsConnector:
    """
    Return the process-wide Sheets connector built from environment settings.
    """

    return GoogleSheetsConnector.from_settings(get_sheet_settings())
