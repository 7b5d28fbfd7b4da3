"""
app/services package marker.
"""

from app.services.site_visit_service import (
    BREAKDOWN_DIMENSIONS,
    SiteVisitAnalyticsService,
    get_site_visit_service,
)

__all__ = [
    "BREAKDOWN_DIMENSIONS",
    "SiteVisitAnalyticsService",
    "get_site_visit_service",
]
