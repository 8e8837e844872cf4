"""
app/mappers package marker.
"""

from app.mappers.budget_schema import (
    BUDGET_COLUMNS,
    CASH_PAYMENT_METHODS,
    DEVICE_TYPES,
    EXPORT_HEADERS,
    PAYMENT_METHODS,
    REQUIRED_HEADERS,
    BudgetColumn,
    FieldKind,
    from_budget_model,
    header_for,
)

__all__ = [
    "BUDGET_COLUMNS",
    "CASH_PAYMENT_METHODS",
    "DEVICE_TYPES",
    "EXPORT_HEADERS",
    "PAYMENT_METHODS",
    "REQUIRED_HEADERS",
    "BudgetColumn",
    "FieldKind",
    "from_budget_model",
    "header_for",
]
