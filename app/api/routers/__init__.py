"""
app/api/routers package marker.
"""

from app.api.routers.budget_csv import router as budget_csv_router

__all__ = [
    "budget_csv_router",
]
