"""
app/api/routers package marker.
"""

from app.api.routers.site_visits import router as site_visits_router

__all__ = [
    "site_visits_router",
]
