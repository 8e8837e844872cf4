"""
app/schemas/budget_csv.py

Request/response schemas for the budget CSV endpoints.

Monetary fields are integer centavos, the same unit the domain stores.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.budget import BudgetRecord
from app.services.budget_exporter import ExportFilters


class SuggestionResponse(BaseModel):
    """
    API response model for a proposed correction.
    """

    original_value: str
    suggested_value: str
    confidence: Literal["high", "medium", "low"]
    auto_applicable: bool
    applied: bool
    reason: str


class FindingResponse(BaseModel):
    """
    API response model for one finding.
    """

    severity: Literal["error", "warning", "suggestion"]
    code: str
    message: str
    row_number: int | None = Field(default=None, ge=1)
    field: str | None = None
    value: str | None = None
    suggestion: SuggestionResponse | None = None


class BudgetRecordPayload(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    device_type: str = Field(min_length=1)
    service_description: str = Field(min_length=1)
    quality: str | None = None
    notes: str | None = None
    cash_price: int = Field(ge=0, description="Centavos")
    installment_price: int = Field(ge=0, description="Centavos")
    installment_count: int = Field(ge=1)
    payment_method: str = Field(min_length=1)
    warranty_months: int = Field(ge=0)
    validity_days: int = Field(ge=0)
    includes_delivery: bool
    includes_screen_protector: bool

    def to_record(self) -> BudgetRecord:
        return BudgetRecord(**self.model_dump())

    @classmethod
    def from_record(cls, record: BudgetRecord) -> "BudgetRecordPayload":
        return cls(
            device_type=record.device_type,
            service_description=record.service_description,
            quality=record.quality,
            notes=record.notes,
            cash_price=record.cash_price,
            installment_price=record.installment_price,
            installment_count=record.installment_count,
            payment_method=record.payment_method,
            warranty_months=record.warranty_months,
            validity_days=record.validity_days,
            includes_delivery=record.includes_delivery,
            includes_screen_protector=record.includes_screen_protector,
        )


class BudgetValidationResponse(BaseModel):
    """
    API response model for a validation run.
    """

    stage: str
    total_rows: int = Field(..., ge=0)
    valid_rows: int = Field(..., ge=0)
    invalid_rows: int = Field(..., ge=0)
    warned_rows: int = Field(..., ge=0)
    corrections_applied: int = Field(..., ge=0)
    is_valid: bool
    findings: list[FindingResponse] = Field(default_factory=list)
    findings_truncated: bool = False
    records: list[BudgetRecordPayload] = Field(default_factory=list)


class BudgetImportResponse(BudgetValidationResponse):
    """
    API response model for an import run.
    """

    inserted: int = Field(..., ge=0)
    persisted: bool


class ExportFiltersPayload(BaseModel):
    """
    Optional export criteria. Price bounds are in reais.
    """

    model_config = ConfigDict(extra="forbid")

    device_types: list[str] | None = None
    payment_methods: list[str] | None = None
    min_warranty_months: int | None = Field(default=None, ge=0)
    max_warranty_months: int | None = Field(default=None, ge=0)
    min_validity_days: int | None = Field(default=None, ge=0)
    max_validity_days: int | None = Field(default=None, ge=0)
    min_cash_price: Decimal | None = Field(default=None, ge=0)
    max_cash_price: Decimal | None = Field(default=None, ge=0)
    includes_delivery: bool | None = None
    includes_screen_protector: bool | None = None

    @model_validator(mode="after")
    def _check_ranges(self) -> "ExportFiltersPayload":
        for low, high in (
            ("min_warranty_months", "max_warranty_months"),
            ("min_validity_days", "max_validity_days"),
            ("min_cash_price", "max_cash_price"),
        ):
            low_value = getattr(self, low)
            high_value = getattr(self, high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise ValueError(f"{low} must not be greater than {high}.")
        return self

    def to_filters(self) -> ExportFilters:
        return ExportFilters(
            device_types=tuple(self.device_types) if self.device_types is not None else None,
            payment_methods=(
                tuple(self.payment_methods) if self.payment_methods is not None else None
            ),
            min_warranty_months=self.min_warranty_months,
            max_warranty_months=self.max_warranty_months,
            min_validity_days=self.min_validity_days,
            max_validity_days=self.max_validity_days,
            min_cash_price=self.min_cash_price,
            max_cash_price=self.max_cash_price,
            includes_delivery=self.includes_delivery,
            includes_screen_protector=self.includes_screen_protector,
        )


class BudgetExportRequest(BaseModel):
    records: list[BudgetRecordPayload] = Field(default_factory=list)
    filters: ExportFiltersPayload | None = None
