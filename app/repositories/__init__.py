"""
app/repositories package marker.
"""

from app.repositories.budget_repository import BudgetRepository

__all__ = [
    "BudgetRepository",
]
