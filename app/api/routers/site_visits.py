"""
app/api/routers/site_visits.py

Site-visit analytics HTTP endpoints.

All endpoints are read-only GETs. Query arguments are validated before the
sheet is read; a sheet read failure returns 502 rather than an empty payload.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_period_spec, split_csv_param, translate_analytics_errors
from app.config import get_api_settings
from app.domain.site_visit import Breakdown, VisitorCount, VisitSummary
from app.schemas.site_visits import (
    BreakdownResponse,
    BucketEntry,
    HandlerVisits,
    HeadersResponse,
    IncomeCount,
    RemarkResponse,
    RemarksResponse,
    SalespersonLookupResponse,
    SourceReportResponse,
    VisitorCountResponse,
    VisitSummaryResponse,
)
from app.services.site_visit_service import SiteVisitAnalyticsService, get_site_visit_service
from site_analytics.periods import PeriodSpec

router = APIRouter(tags=["site-visits"])


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------


def _visitor_response(result: VisitorCount) -> VisitorCountResponse:
    return VisitorCountResponse(
        period=result.period,
        total=result.total,
        undated_records=result.undated_records,
    )


def _breakdown_response(result: Breakdown) -> BreakdownResponse:
    return BreakdownResponse(
        columns=list(result.columns),
        period=result.period,
        total=result.total,
        buckets=[BucketEntry(label=label, count=count) for label, count in result.counts.items()],
    )


def _visit_response(visit: VisitSummary) -> VisitSummaryResponse:
    return VisitSummaryResponse(
        row_number=visit.row_number,
        timestamp=visit.timestamp,
        handler=visit.handler,
        income=visit.income,
        lead_source=visit.lead_source,
        remark=visit.remark,
        sentiment=visit.sentiment,
    )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@router.get("/verify", response_model=HeadersResponse)
def verify_headers(
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> HeadersResponse:
    """
    Return the sheet's header row as read.
    """

    with translate_analytics_errors():
        result = service.list_headers()
    return HeadersResponse(headers=list(result.headers), total_columns=result.total_columns)


# ---------------------------------------------------------------------------
# Visitor counts
# ---------------------------------------------------------------------------


@router.get("/visitors/today", response_model=VisitorCountResponse)
def visitors_today(
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> VisitorCountResponse:
    with translate_analytics_errors():
        return _visitor_response(service.visitors_today())


@router.get("/visitors", response_model=VisitorCountResponse)
def visitors_in_period(
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> VisitorCountResponse:
    """
    Count dated visits in the requested period; all dated visits by default.
    """

    with translate_analytics_errors():
        return _visitor_response(service.visitors_in_period(period))


@router.get("/visitors/month/{month_key}", response_model=VisitorCountResponse)
def visitors_in_month(
    month_key: str,
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> VisitorCountResponse:
    with translate_analytics_errors():
        return _visitor_response(service.visitors_in_month(month_key))


# ---------------------------------------------------------------------------
# Breakdowns
# ---------------------------------------------------------------------------


@router.get("/breakdown", response_model=BreakdownResponse)
def breakdown_by_column(
    column: str | None = Query(default=None, description="Header label to group by"),
    order: str = Query(default="count", pattern="^(count|first_seen)$"),
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> BreakdownResponse:
    """
    Count visits per value of an arbitrary column.

    Returns 404 when the column is not on the sheet.
    """

    with translate_analytics_errors():
        result = service.breakdown_by(column or "", period, sort_by_count=order == "count")
    return _breakdown_response(result)


@router.get("/breakdown/{dimension}", response_model=BreakdownResponse)
def breakdown_by_dimension(
    dimension: str,
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> BreakdownResponse:
    """
    Count visits per lead source, income bracket, configuration, industry or requirement.
    """

    with translate_analytics_errors():
        result = service.dimension_breakdown(dimension, period)
    return _breakdown_response(result)


@router.get("/cross-breakdown", response_model=BreakdownResponse)
def cross_breakdown(
    columns: str | None = Query(default=None, description="Comma-separated header labels"),
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> BreakdownResponse:
    with translate_analytics_errors():
        result = service.cross_breakdown(split_csv_param(columns), period)
    return _breakdown_response(result)


@router.get("/handlers/leaderboard", response_model=BreakdownResponse)
def handler_leaderboard(
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> BreakdownResponse:
    with translate_analytics_errors():
        result = service.handler_leaderboard(period)
    return _breakdown_response(result)


# ---------------------------------------------------------------------------
# Lookups and reports
# ---------------------------------------------------------------------------


@router.get("/salesperson", response_model=SalespersonLookupResponse)
def salesperson_lookup(
    name: str | None = Query(default=None, description="Case-insensitive name fragment"),
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> SalespersonLookupResponse:
    with translate_analytics_errors():
        result = service.salesperson_lookup(name or "", period)
    return SalespersonLookupResponse(
        name=result.name,
        period=result.period,
        total=result.total,
        visits=[_visit_response(visit) for visit in result.visits],
    )


@router.get("/remarks", response_model=RemarksResponse)
def remarks_with_sentiment(
    period: PeriodSpec | None = Depends(get_period_spec),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> RemarksResponse:
    with translate_analytics_errors():
        result = service.remarks_with_sentiment(period)
    return RemarksResponse(
        period=result.period,
        total=result.total,
        sentiment_summary=result.sentiment_summary,
        remarks=[
            RemarkResponse(
                row_number=entry.row_number,
                timestamp=entry.timestamp,
                text=entry.text,
                sentiment=entry.sentiment,
            )
            for entry in result.remarks
        ],
    )


@router.get("/socialmedia", response_model=SourceReportResponse)
def social_media_report(
    source: str | None = Query(default=None, description="Lead source substring"),
    months: str | None = Query(default=None, description="Comma-separated YYYY-MM keys"),
    service: SiteVisitAnalyticsService = Depends(get_site_visit_service),
) -> SourceReportResponse:
    """
    Visits from one lead source ("social media" by default) over the given months.
    """

    with translate_analytics_errors():
        result = service.source_report(source or get_api_settings().default_source, split_csv_param(months))
    return SourceReportResponse(
        months=list(result.months),
        source=result.source,
        total=result.total,
        handlers=[HandlerVisits(handler=name, visits=count) for name, count in result.handlers.items()],
        income_breakdown=[IncomeCount(income=label, count=count) for label, count in result.income_breakdown.items()],
        sentiment_summary=result.sentiment_summary,
        remarks=[_visit_response(visit) for visit in result.visits],
    )
