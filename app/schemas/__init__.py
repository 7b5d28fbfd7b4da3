"""
app/schemas package marker.
"""

from app.schemas.site_visits import (
    BreakdownResponse,
    BucketEntry,
    HandlerVisits,
    HeadersResponse,
    HealthResponse,
    IncomeCount,
    RemarkResponse,
    RemarksResponse,
    SalespersonLookupResponse,
    SourceReportResponse,
    VisitorCountResponse,
    VisitSummaryResponse,
)

__all__ = [
    "BreakdownResponse",
    "BucketEntry",
    "HandlerVisits",
    "HeadersResponse",
    "HealthResponse",
    "IncomeCount",
    "RemarkResponse",
    "RemarksResponse",
    "SalespersonLookupResponse",
    "SourceReportResponse",
    "VisitorCountResponse",
    "VisitSummaryResponse",
]
