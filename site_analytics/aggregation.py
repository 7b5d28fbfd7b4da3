"""
site_analytics/aggregation.py

Group-by, cross-tabulation and text-match operators over normalized records.

All functions are pure. Buckets are plain dicts whose insertion order is the
first-seen order of their labels; ``sort_by_count`` reorders by descending
count while keeping first-seen order among ties.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Sequence

from site_analytics.errors import UnknownColumnError
from site_analytics.normalizer import ColumnIndex, Record

UNKNOWN_LABEL = "Unknown"
CROSS_TAB_DELIMITER = "|"

_HANDLER_SEPARATORS = re.compile(r"[,&/]")


def require_columns(columns: ColumnIndex, names: Sequence[str]) -> None:
    """
    Raise :class:`UnknownColumnError` for the first of *names* not in *columns*.
    """

    for name in names:
        if name not in columns:
            raise UnknownColumnError(name, available=columns.headers)


def _label(record: Record, column: str) -> str:
    return record.get(column) or UNKNOWN_LABEL


def sort_bucket(bucket: dict[str, int]) -> dict[str, int]:
    """
    Return *bucket* ordered by descending count; ties keep first-seen order.
    """

    return dict(sorted(bucket.items(), key=lambda item: -item[1]))


def count_by(
    records: Sequence[Record],
    column: str,
    *,
    sort_by_count: bool = False,
    index: ColumnIndex | None = None,
) -> dict[str, int]:
    """
    Count records per value of *column*.

    Blank cells, and every cell when the column does not exist, are counted
    under ``"Unknown"``. When the sheet's *index* is given the column is
    required and a missing one raises :class:`UnknownColumnError`, even for
    a sheet with no data rows.
    """

    if index is not None:
        require_columns(index, [column])

    bucket: dict[str, int] = {}
    for record in records:
        label = _label(record, column)
        bucket[label] = bucket.get(label, 0) + 1
    return sort_bucket(bucket) if sort_by_count else bucket


def cross_tabulate(
    records: Sequence[Record],
    columns: Sequence[str],
    *,
    sort_by_count: bool = False,
    index: ColumnIndex | None = None,
) -> dict[str, int]:
    """
    Count records per combination of *columns*, keyed ``"a|b|c"``.

    *index* makes every column required, as for :func:`count_by`.
    """

    if index is not None:
        require_columns(index, columns)

    bucket: dict[str, int] = {}
    for record in records:
        key = CROSS_TAB_DELIMITER.join(_label(record, column) for column in columns)
        bucket[key] = bucket.get(key, 0) + 1
    return sort_bucket(bucket) if sort_by_count else bucket


def filter_by_text_match(
    records: Iterable[Record],
    columns: Sequence[str],
    needle: str,
) -> list[Record]:
    """
    Keep records where any of *columns* contains *needle*, case-insensitively.
    """

    target = (needle or "").strip().casefold()
    if not target:
        return []
    return [
        record
        for record in records
        if any(target in (record.get(column) or "").casefold() for column in columns)
    ]


def split_handlers(text: str | None) -> list[str]:
    """
    Split a handler cell such as ``"Asha & Ravi / Meena"`` into trimmed names.
    """

    if not text:
        return []
    return [name.strip() for name in _HANDLER_SEPARATORS.split(text) if name.strip()]


def record_handlers(record: Record, columns: Sequence[str]) -> list[str]:
    """
    Distinct handler names across *columns* of one record, first-seen order.
    """

    names: dict[str, None] = {}
    for column in columns:
        for name in split_handlers(record.get(column)):
            names.setdefault(name, None)
    return list(names)


def count_handlers(
    records: Iterable[Record],
    columns: Sequence[str],
    *,
    sort_by_count: bool = True,
) -> dict[str, int]:
    """
    Count visits per distinct handler; a name counts once per record.
    """

    counter: Counter[str] = Counter()
    for record in records:
        counter.update(record_handlers(record, columns))
    bucket = dict(counter)
    return sort_bucket(bucket) if sort_by_count else bucket
