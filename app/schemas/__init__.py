"""
app/schemas package marker.
"""

from app.schemas.budget_csv import (
    BudgetExportRequest,
    BudgetImportResponse,
    BudgetRecordPayload,
    BudgetValidationResponse,
    ExportFiltersPayload,
    FindingResponse,
    SuggestionResponse,
)

__all__ = [
    "BudgetExportRequest",
    "BudgetImportResponse",
    "BudgetRecordPayload",
    "BudgetValidationResponse",
    "ExportFiltersPayload",
    "FindingResponse",
    "SuggestionResponse",
]
