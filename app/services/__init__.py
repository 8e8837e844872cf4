"""
app/services package marker.
"""

from app.services.budget_exporter import (
    BudgetExporter,
    ExportFilters,
    export_records,
    generate_template,
)
from app.services.budget_import_service import (
    BudgetCSVDecodeError,
    BudgetImportService,
    BudgetPersistenceError,
    get_budget_import_service,
)
from app.services.validation_pipeline import ValidationPipeline, validate_and_correct

__all__ = [
    "BudgetCSVDecodeError",
    "BudgetExporter",
    "BudgetImportService",
    "BudgetPersistenceError",
    "ExportFilters",
    "ValidationPipeline",
    "export_records",
    "generate_template",
    "get_budget_import_service",
    "validate_and_correct",
]
