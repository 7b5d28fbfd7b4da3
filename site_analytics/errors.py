"""
site_analytics/errors.py

Exceptions raised by the site-visit analytics core.
"""

from __future__ import annotations


class SiteAnalyticsError(Exception):
    """Base exception for analytics core failures."""


class UnknownColumnError(SiteAnalyticsError, LookupError):
    """
    Raised when a required column has no match in the sheet headers.
    """

    def __init__(self, column: str, available: tuple[str, ...] = ()) -> None:
        super().__init__(f"Column not found: {column!r}")
        self.column = column
        self.available = available


class InvalidQueryParameterError(SiteAnalyticsError, ValueError):
    """
    Raised when a query argument is missing or malformed.

    Always raised before the sheet is fetched.
    """

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter

    def to_dict(self) -> dict[str, str]:
        return {"parameter": self.parameter, "message": str(self)}
