"""
site_analytics/timestamps.py

Calendar-date resolution for the form's free-form "Timestamp" cells.

Google Forms writes timestamps such as ``11/3/2025 14:05:09`` whose day/month
order depends on the spreadsheet locale. The resolver reads the first three
tokens after splitting on ``/``, space and ``:``:

* the token that is exactly four digits is the year; if none is, the third
  token is the year (two-digit years are taken as 20YY);
* of the remaining two tokens the first is the month and the second the day,
  unless the first is greater than 12, in which case they are swapped.

Dates where both day and month are 12 or less always resolve as MM/DD. That is
a known limitation: nothing in a single cell can disambiguate them.

Time of day is discarded. Anything that does not resolve to a real calendar
date yields ``None``.
"""

from __future__ import annotations

import re
from datetime import date

_TOKEN_SEPARATORS = re.compile(r"[/ :]")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:$|[T ])")


def _as_int(token: str) -> int | None:
    token = token.strip()
    if not (token.isascii() and token.isdigit()):
        return None
    return int(token)


def _is_four_digit_year(token: str) -> bool:
    return len(token) == 4 and token.isascii() and token.isdigit()


def _resolve_year(token: str) -> int | None:
    year = _as_int(token)
    if year is None:
        return None
    if len(token.strip()) <= 2:
        year += 2000
    return year


def _build_date(year: int, month: int, day: int) -> date | None:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_timestamp(text: str | None) -> date | None:
    """
    Resolve one timestamp cell to a calendar date, or ``None``.

    Never raises for malformed input.
    """

    if not text or not isinstance(text, str):
        return None
    text = text.strip()

    iso_match = _ISO_DATE.match(text)
    if iso_match:
        year, month, day = (int(group) for group in iso_match.groups())
        return _build_date(year, month, day)

    tokens = _TOKEN_SEPARATORS.split(text)
    if len(tokens) < 3:
        return None

    fields = tokens[:3]
    year_position = next(
        (position for position, token in enumerate(fields) if _is_four_digit_year(token)),
        2,
    )
    year = _resolve_year(fields[year_position])
    month_token, day_token = (token for position, token in enumerate(fields) if position != year_position)
    month = _as_int(month_token)
    day = _as_int(day_token)
    if year is None or month is None or day is None:
        return None

    if month > 12:
        month, day = day, month

    return _build_date(year, month, day)


def month_key(value: date) -> str:
    """
    Return the ``YYYY-MM`` key for *value*.
    """

    return f"{value.year:04d}-{value.month:02d}"
