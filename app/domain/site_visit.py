"""
app/domain/site_visit.py

Result models returned by the site-visit analytics service.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class VisitorCount:
    """
    Number of dated visits inside one period.
    """

    period: str
    total: int
    undated_records: int = 0


@dataclass(frozen=True)
class Breakdown:
    """
    Label-to-count bucket for one or more columns.
    """

    columns: tuple[str, ...]
    period: str
    total: int
    counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class VisitSummary:
    """
    Compact view of one record for lookup and report payloads.
    """

    row_number: int
    timestamp: str
    handler: str
    income: str
    lead_source: str
    remark: str
    sentiment: str


@dataclass(frozen=True)
class SalespersonLookup:
    name: str
    period: str
    total: int
    visits: list[VisitSummary] = field(default_factory=list)


@dataclass(frozen=True)
class RemarkEntry:
    row_number: int
    timestamp: str
    text: str
    sentiment: str


@dataclass(frozen=True)
class RemarksReport:
    period: str
    total: int
    sentiment_summary: dict[str, int]
    remarks: list[RemarkEntry] = field(default_factory=list)


@dataclass(frozen=True)
class SourceReport:
    """
    Month-scoped report for one lead source, e.g. "social media".
    """

    source: str
    months: tuple[str, ...]
    total: int
    handlers: dict[str, int]
    income_breakdown: dict[str, int]
    sentiment_summary: dict[str, int]
    visits: list[VisitSummary] = field(default_factory=list)


@dataclass(frozen=True)
class SheetHeaders:
    headers: tuple[str, ...]

    @property
    def total_columns(self) -> int:
        return len(self.headers)
