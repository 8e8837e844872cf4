"""
app/domain package marker.
"""

from app.domain.budget import (
    BudgetImportSummary,
    BudgetRecord,
    Confidence,
    Finding,
    PipelineStage,
    Severity,
    Strictness,
    Suggestion,
    ValidationReport,
)

__all__ = [
    "BudgetImportSummary",
    "BudgetRecord",
    "Confidence",
    "Finding",
    "PipelineStage",
    "Severity",
    "Strictness",
    "Suggestion",
    "ValidationReport",
]
