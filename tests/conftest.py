"""
Shared fixtures: an in-memory site-visit sheet, fake grid connectors and a
fixed clock. No test touches the network.
"""

from __future__ import annotations

import os
from datetime import datetime

import pytest

# app.main validates the environment at import time.
os.environ.setdefault("SHEET_ID", "test-sheet-id")
os.environ.setdefault("GOOGLE_SERVICE_KEY", '{"type": "service_account"}')

from app.config import SiteVisitColumns  # noqa: E402
from app.connectors.base import BaseGridConnector, GridFetchError, RawGrid  # noqa: E402
from app.services.site_visit_service import SiteVisitAnalyticsService  # noqa: E402

FIXED_NOW = datetime(2025, 11, 15, 10, 0, 0)

HEADERS = [
    "Timestamp",
    "Name",
    " How did you come to  Know about us ",
    "Site Visit handled by",
    "Sales person",
    "Current annual income",
    "Configurations",
    "I am working in",
    "Requirements",
    "site visit Remarks",
    "Follow up remarks",
]

ROWS = [
    # Row 2: today
    ["11/15/2025 09:12:00", "A", "Social Media", "Asha", "Ravi", "10-20 L", "2 BHK", "IT", "Ready", "Very interested", ""],
    # Row 3: DD/MM, 14 Nov
    ["14/11/2025 18:00:00", "B", "Newspaper", "Ravi & Meena", "", "20-30 L", "3 BHK", "Finance", "", "", "Will call back"],
    # Row 4: exactly seven days before now
    ["11/08/2025 11:00:00", "C", "social media - instagram", "Meena", "Asha", "", "2 BHK", "IT", "", "ok", ""],
    # Row 5: eight days before now, short row
    ["11/07/2025 11:00:00", "D", "Referral", "Asha", "", "10-20 L"],
    # Row 6: previous month
    ["10/20/2025 10:00:00", "E", "Social Media", "Ravi/Asha", "", "30+ L", "3 BHK", "Business", "", "Booked", "follow up pending"],
    # Row 7: unparseable timestamp
    ["not a date", "F", "Walk-in", "", "Sunil", "", "", "", "", "", ""],
]


class StaticGridConnector(BaseGridConnector):
    """Returns a fixed grid and records every range it was asked for."""

    source = "static"

    def __init__(self, grid: RawGrid) -> None:
        self.grid = grid
        self.calls: list[str] = []

    def fetch_grid(self, range_spec: str) -> RawGrid:
        self.calls.append(range_spec)
        return [list(row) for row in self.grid]


class FailingGridConnector(BaseGridConnector):
    source = "failing"

    def __init__(self) -> None:
        self.calls: list[str] = []

    def fetch_grid(self, range_spec: str) -> RawGrid:
        self.calls.append(range_spec)
        raise GridFetchError("simulated outage", range_spec=range_spec, status_code=503)


@pytest.fixture()
def sample_grid() -> RawGrid:
    return [list(HEADERS)] + [list(row) for row in ROWS]


@pytest.fixture()
def connector(sample_grid: RawGrid) -> StaticGridConnector:
    return StaticGridConnector(sample_grid)


@pytest.fixture()
def failing_connector() -> FailingGridConnector:
    return FailingGridConnector()


@pytest.fixture()
def service(connector: StaticGridConnector) -> SiteVisitAnalyticsService:
    return SiteVisitAnalyticsService(
        connector=connector,
        range_spec="'site visits'!A1:X",
        columns=SiteVisitColumns(),
        clock=lambda: FIXED_NOW,
    )
