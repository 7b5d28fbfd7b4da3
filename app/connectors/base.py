"""
app/connectors/base.py

Grid connector abstraction for the site-visit sheet.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

RawGrid = list[list[str]]


class GridFetchError(RuntimeError):
    """
    Raised when the source grid cannot be read (network, auth, not found).

    Distinct from an empty grid, which is a successful read.
    """

    def __init__(self, message: str, *, range_spec: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.range_spec = range_spec
        self.status_code = status_code


class BaseGridConnector(ABC):
    """
    Reads one tabular range and returns it as rows of string cells.

    Implementations must be side-effect free from the caller's point of view
    and safe to call concurrently.
    """

    source: str = "grid"

    @abstractmethod
    def fetch_grid(self, range_spec: str) -> RawGrid:
        """
        Return every row of *range_spec*; the first row holds the headers.

        Raises
        ------
        GridFetchError
            When the read fails for any reason.
        """
