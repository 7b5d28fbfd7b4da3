from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_api_settings, get_sheet_settings, load_env_files
from app.schemas.site_visits import HealthResponse

API_VERSION = "8.0.0"


def _validate_env() -> None:
    """
    Validate all required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - SHEET_ID must be set and non-empty.
    - Exactly one credential source is needed: GOOGLE_SERVICE_KEY (inline
      JSON) or GOOGLE_SERVICE_KEY_PATH (key file).
    - GOOGLE_SERVICE_KEY, when set, must parse as a JSON object.
    """

    load_env_files()

    errors: list[str] = []

    # --- Spreadsheet ----------------------------------------------------
    if not os.getenv("SHEET_ID", "").strip():
        errors.append("SHEET_ID is not set. Provide the ID of the site visits spreadsheet.")

    # --- Credentials ----------------------------------------------------
    inline_key = os.getenv("GOOGLE_SERVICE_KEY", "").strip()
    key_path = os.getenv("GOOGLE_SERVICE_KEY_PATH", "").strip()
    if not inline_key and not key_path:
        errors.append(
            "No Google credentials configured. Set GOOGLE_SERVICE_KEY (service-account JSON) "
            "or GOOGLE_SERVICE_KEY_PATH. Empty strings are not permitted."
        )
    if inline_key:
        try:
            parsed = json.loads(inline_key)
        except ValueError:
            parsed = None
        if not isinstance(parsed, dict):
            errors.append("GOOGLE_SERVICE_KEY is set but is not a JSON object.")

    if errors:
        raise RuntimeError(
            "Startup validation failed: missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log the configured sheet on boot; credentials are loaded on first request."""
    settings = get_sheet_settings()
    logging.getLogger(__name__).info(
        "Site visit analytics v%s serving spreadsheet=%s range=%s",
        API_VERSION,
        settings.spreadsheet_id,
        settings.range_spec,
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    api_settings = get_api_settings()
    application = FastAPI(
        title=api_settings.title,
        version=API_VERSION,
        lifespan=_lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_settings.cors_allow_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from app.api.routers import site_visits_router

    application.include_router(site_visits_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(status="Site visit analytics API live", version=API_VERSION)

    return application


app = create_app()
