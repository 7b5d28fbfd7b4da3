"""
site_analytics/normalizer.py

Turns a raw spreadsheet grid into header-addressable records.

The first grid row holds the header labels. Data rows may be shorter than the
header row (the Sheets API omits trailing blank cells) and are right-padded
with empty strings; cells past the last header are dropped.

Column lookups are tolerant of case, surrounding whitespace and runs of inner
whitespace. When two headers normalize to the same name the first one wins.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Sequence

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")

RawGrid = Sequence[Sequence[Any]]


def normalize_header(header: str | None) -> str:
    """
    Normalize a header label for lookups: trim, collapse whitespace, case-fold.
    """

    if not header:
        return ""
    return _WHITESPACE_RUN.sub(" ", str(header)).strip().casefold()


def _clean_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def find_column_index(headers: Sequence[str], wanted: str) -> int | None:
    """
    Return the index of the first header matching *wanted*, or ``None``.
    """

    target = normalize_header(wanted)
    if not target:
        return None
    for position, header in enumerate(headers):
        if normalize_header(header) == target:
            return position
    return None


@dataclass(frozen=True)
class ColumnIndex:
    """
    Name-to-position lookup table built once per fetched sheet.
    """

    headers: tuple[str, ...]
    _positions: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        positions: dict[str, int] = {}
        for position, header in enumerate(self.headers):
            key = normalize_header(header)
            if key and key not in positions:
                positions[key] = position
        object.__setattr__(self, "_positions", positions)

    def locate(self, name: str) -> int | None:
        return self._positions.get(normalize_header(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.locate(name) is not None

    def resolve(self, name: str) -> str | None:
        """Return the sheet's own label for *name*, if present."""
        position = self.locate(name)
        return None if position is None else self.headers[position]


@dataclass(frozen=True)
class Record:
    """
    One normalized data row.

    ``row_number`` is the 1-based sheet row (the header row is row 1), which
    is the only identity a record has.
    """

    row_number: int
    values: tuple[str, ...]
    columns: ColumnIndex = field(repr=False)

    @property
    def headers(self) -> tuple[str, ...]:
        return self.columns.headers

    def get(self, column: str, default: str | None = None) -> str | None:
        """
        Return the cell under *column*, or *default* when the column is absent.
        """

        position = self.columns.locate(column)
        if position is None:
            return default
        return self.values[position]

    def __getitem__(self, column: str) -> str:
        position = self.columns.locate(column)
        if position is None:
            raise KeyError(column)
        return self.values[position]

    def as_dict(self) -> dict[str, str]:
        payload: dict[str, str] = {}
        for header, value in zip(self.headers, self.values):
            payload.setdefault(header, value)
        return payload


class NormalizedSheet(NamedTuple):
    headers: tuple[str, ...]
    records: tuple[Record, ...]

    @property
    def columns(self) -> ColumnIndex:
        if self.records:
            return self.records[0].columns
        return ColumnIndex(self.headers)


def normalize(grid: RawGrid | None) -> NormalizedSheet:
    """
    Build header-keyed records from *grid*.

    An empty or missing grid yields no headers and no records.
    """

    if not grid:
        return NormalizedSheet(headers=(), records=())

    headers = tuple(_clean_cell(cell) for cell in (grid[0] or ()))
    columns = ColumnIndex(headers)
    width = len(headers)

    records: list[Record] = []
    for row_number, row in enumerate(grid[1:], start=2):
        cells = [_clean_cell(cell) for cell in (row or ())]
        if len(cells) > width:
            logger.debug(
                "Row %d has %d cells for %d headers; dropping the overflow",
                row_number,
                len(cells),
                width,
            )
            del cells[width:]
        cells.extend([""] * (width - len(cells)))
        records.append(Record(row_number=row_number, values=tuple(cells), columns=columns))

    return NormalizedSheet(headers=headers, records=tuple(records))
