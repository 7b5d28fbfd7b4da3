"""
app/schemas/site_visits.py

Response schemas for site-visit analytics endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class HeadersResponse(BaseModel):
    """
    Diagnostic view of the sheet header row.
    """

    headers: list[str]
    total_columns: int = Field(..., ge=0)


class VisitorCountResponse(BaseModel):
    period: str
    total: int = Field(..., ge=0)
    undated_records: int = Field(0, ge=0)


class BucketEntry(BaseModel):
    label: str
    count: int = Field(..., ge=0)


class BreakdownResponse(BaseModel):
    """
    Label counts for one column, or one combination of columns.
    """

    columns: list[str]
    period: str
    total: int = Field(..., ge=0)
    buckets: list[BucketEntry] = Field(default_factory=list)


class VisitSummaryResponse(BaseModel):
    row_number: int = Field(..., ge=2)
    timestamp: str
    handler: str
    income: str
    lead_source: str
    remark: str
    sentiment: str


class SalespersonLookupResponse(BaseModel):
    name: str
    period: str
    total: int = Field(..., ge=0)
    visits: list[VisitSummaryResponse] = Field(default_factory=list)


class RemarkResponse(BaseModel):
    row_number: int = Field(..., ge=2)
    timestamp: str
    text: str
    sentiment: str


class RemarksResponse(BaseModel):
    period: str
    total: int = Field(..., ge=0)
    sentiment_summary: dict[str, int]
    remarks: list[RemarkResponse] = Field(default_factory=list)


class HandlerVisits(BaseModel):
    handler: str
    visits: int = Field(..., ge=0)


class IncomeCount(BaseModel):
    income: str
    count: int = Field(..., ge=0)


class SourceReportResponse(BaseModel):
    """
    Month-scoped report for one lead source.
    """

    months: list[str]
    source: str
    total: int = Field(..., ge=0)
    handlers: list[HandlerVisits] = Field(default_factory=list)
    income_breakdown: list[IncomeCount] = Field(default_factory=list)
    sentiment_summary: dict[str, int]
    remarks: list[VisitSummaryResponse] = Field(default_factory=list)
