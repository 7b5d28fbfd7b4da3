"""
app/domain package marker.
"""

from app.domain.site_visit import (
    Breakdown,
    RemarkEntry,
    RemarksReport,
    SalespersonLookup,
    SheetHeaders,
    SourceReport,
    VisitorCount,
    VisitSummary,
)

__all__ = [
    "Breakdown",
    "RemarkEntry",
    "RemarksReport",
    "SalespersonLookup",
    "SheetHeaders",
    "SourceReport",
    "VisitorCount",
    "VisitSummary",
]
