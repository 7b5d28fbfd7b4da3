"""
site_analytics/periods.py

Time-window selection for site-visit records.

A period is one of:

    today           same calendar day as now
    this_week       within [now - 7 days, now], both ends inclusive
    this_month      same month and year as now
    last_<N>_days   within [now - N days, now]
    month(s)        month key equality against one or more ``YYYY-MM`` keys
    range           within [from, to], both ends inclusive
    all             any record with a parseable timestamp

Records whose timestamp cannot be parsed never match any period.
Comparison is by calendar date; time of day is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Sequence

from site_analytics.errors import InvalidQueryParameterError
from site_analytics.normalizer import Record
from site_analytics.timestamps import month_key, parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP_COLUMN = "Timestamp"

_LAST_N_DAYS = re.compile(r"^last_(\d{1,4})_days?$")
_MONTH_KEY = re.compile(r"^(\d{4})-(\d{1,2})$")


class PeriodKind(str, Enum):
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_N_DAYS = "last_n_days"
    MONTHS = "months"
    RANGE = "range"


@dataclass(frozen=True)
class PeriodSpec:
    """
    Parsed time-window selector.
    """

    kind: PeriodKind = PeriodKind.ALL
    days: int | None = None
    months: tuple[str, ...] = ()
    start: date | None = None
    end: date | None = None

    @property
    def label(self) -> str:
        if self.kind is PeriodKind.LAST_N_DAYS:
            return f"last_{self.days}_days"
        if self.kind is PeriodKind.MONTHS:
            return ",".join(self.months)
        if self.kind is PeriodKind.RANGE:
            return f"{self.start.isoformat()}..{self.end.isoformat()}"  # type: ignore[union-attr]
        return self.kind.value


ALL_TIME = PeriodSpec()


def _as_date(now: datetime | date) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def normalize_month_key(raw: str, *, parameter: str = "month") -> str:
    """
    Validate a ``YYYY-MM`` key and return it zero-padded.
    """

    match = _MONTH_KEY.match((raw or "").strip())
    if not match:
        raise InvalidQueryParameterError(parameter, f"{parameter} must look like YYYY-MM, got {raw!r}.")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidQueryParameterError(parameter, f"{parameter} has an invalid month: {raw!r}.")
    return f"{year:04d}-{month:02d}"


def _parse_iso_date(raw: str, parameter: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise InvalidQueryParameterError(
            parameter, f"{parameter} must be an ISO date (YYYY-MM-DD), got {raw!r}."
        ) from exc


def parse_period_spec(
    period: str | None = None,
    *,
    month: str | None = None,
    months: Sequence[str] | str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> PeriodSpec:
    """
    Build a :class:`PeriodSpec` from loose query arguments.

    Explicit months take precedence over a date range, which takes precedence
    over a named period. Unrecognized period names select all dated records.

    Raises
    ------
    InvalidQueryParameterError
        For malformed month keys, malformed dates, a half-open range or a
        range whose start is after its end.
    """

    month_values: list[str] = []
    if month:
        month_values.append(normalize_month_key(month, parameter="month"))
    if months:
        raw_months = months.split(",") if isinstance(months, str) else list(months)
        month_values.extend(
            normalize_month_key(value, parameter="months") for value in raw_months if value.strip()
        )
    if month_values:
        return PeriodSpec(kind=PeriodKind.MONTHS, months=tuple(dict.fromkeys(month_values)))

    if date_from or date_to:
        if not (date_from and date_to):
            missing = "to" if date_from else "from"
            raise InvalidQueryParameterError(missing, "Both 'from' and 'to' are required for a date range.")
        start = _parse_iso_date(date_from, "from")
        end = _parse_iso_date(date_to, "to")
        if start > end:
            raise InvalidQueryParameterError("from", "'from' must not be after 'to'.")
        return PeriodSpec(kind=PeriodKind.RANGE, start=start, end=end)

    name = (period or "").strip().lower()
    if not name or name == PeriodKind.ALL.value:
        return ALL_TIME
    if name in (PeriodKind.TODAY.value, PeriodKind.THIS_WEEK.value, PeriodKind.THIS_MONTH.value):
        return PeriodSpec(kind=PeriodKind(name))

    last_match = _LAST_N_DAYS.match(name)
    if last_match:
        return PeriodSpec(kind=PeriodKind.LAST_N_DAYS, days=int(last_match.group(1)))

    logger.debug("Unrecognized period %r; selecting all dated records", period)
    return ALL_TIME


def date_in_period(value: date | None, spec: PeriodSpec, now: datetime | date) -> bool:
    """
    Return True when *value* falls inside *spec* relative to *now*.
    """

    if value is None:
        return False

    today = _as_date(now)
    kind = spec.kind
    if kind is PeriodKind.TODAY:
        return value == today
    if kind is PeriodKind.THIS_WEEK:
        return today - timedelta(days=7) <= value <= today
    if kind is PeriodKind.THIS_MONTH:
        return value.year == today.year and value.month == today.month
    if kind is PeriodKind.LAST_N_DAYS:
        return today - timedelta(days=spec.days or 0) <= value <= today
    if kind is PeriodKind.MONTHS:
        return month_key(value) in spec.months
    if kind is PeriodKind.RANGE:
        return spec.start <= value <= spec.end  # type: ignore[operator]
    return True


def matches_period(
    record: Record,
    spec: PeriodSpec,
    *,
    now: datetime | date,
    timestamp_column: str = DEFAULT_TIMESTAMP_COLUMN,
) -> bool:
    """
    Return True when *record*'s timestamp falls inside *spec*.
    """

    return date_in_period(parse_timestamp(record.get(timestamp_column)), spec, now)


def filter_by_period(
    records: Iterable[Record],
    spec: PeriodSpec,
    *,
    now: datetime | date,
    timestamp_column: str = DEFAULT_TIMESTAMP_COLUMN,
) -> list[Record]:
    return [
        record
        for record in records
        if matches_period(record, spec, now=now, timestamp_column=timestamp_column)
    ]
