"""
app/connectors package marker.
"""

from app.connectors.base import BaseGridConnector, GridFetchError, RawGrid
from app.connectors.google_sheets_connector import GoogleSheetsConnector, get_sheets_connector

__all__ = [
    "BaseGridConnector",
    "GoogleSheetsConnector",
    "GridFetchError",
    "RawGrid",
    "get_sheets_connector",
]
