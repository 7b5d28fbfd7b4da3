"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and error translation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, Query, status

from app.connectors.base import GridFetchError
from site_analytics.errors import InvalidQueryParameterError, UnknownColumnError
from site_analytics.periods import PeriodSpec, parse_period_spec

logger = logging.getLogger(__name__)


def get_period_spec(
    period: str | None = Query(
        default=None,
        description="today, this_week, this_month, last_<N>_days or all",
    ),
    month: str | None = Query(default=None, description="Calendar month as YYYY-MM"),
    months: str | None = Query(default=None, description="Comma-separated YYYY-MM keys, any of which matches"),
    date_from: str | None = Query(default=None, alias="from", description="Range start, YYYY-MM-DD"),
    date_to: str | None = Query(default=None, alias="to", description="Range end, YYYY-MM-DD"),
) -> PeriodSpec | None:
    """
    Parse optional period query parameters; ``None`` when none are given.
    """

    if not any((period, month, months, date_from, date_to)):
        return None
    try:
        return parse_period_spec(
            period,
            month=month,
            months=months,
            date_from=date_from,
            date_to=date_to,
        )
    except InvalidQueryParameterError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc


def split_csv_param(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


@contextmanager
def translate_analytics_errors() -> Iterator[None]:
    """
    Map analytics and fetch failures onto HTTP responses.
    """

    try:
        yield
    except InvalidQueryParameterError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except UnknownColumnError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": str(exc), "column": exc.column, "available": list(exc.available)},
        ) from exc
    except GridFetchError as exc:
        logger.error("Sheet fetch failed range=%s: %s", exc.range_spec, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Unable to read the site visits sheet.",
        ) from exc
