"""
app/domain/budget.py

Domain models used by the budget CSV import/export flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Strictness(str, Enum):
    """
    How much the pipeline is allowed to change on its own.

    ``lenient`` applies auto-applicable suggestions; ``strict`` only reports them.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class PipelineStage(str, Enum):
    START = "start"
    HEADERS_PARSED = "headers_parsed"
    ROWS_PARSED = "rows_parsed"
    FIELDS_VALIDATED = "fields_validated"
    BATCH_VALIDATED = "batch_validated"
    REPORT_READY = "report_ready"


@dataclass(frozen=True)
class BudgetRecord:
    """
    Typed budget row. Monetary values are integer minor units (centavos).
    """

    device_type: str
    service_description: str
    cash_price: int
    installment_price: int
    installment_count: int
    payment_method: str
    warranty_months: int
    validity_days: int
    includes_delivery: bool
    includes_screen_protector: bool
    quality: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Suggestion:
    """
    Proposed replacement for one raw value.
    """

    original_value: str
    suggested_value: str
    confidence: Confidence
    auto_applicable: bool
    reason: str
    applied: bool = False


@dataclass(frozen=True)
class Finding:
    """
    One reported issue attached to a row/field.

    ``row_number`` is the physical line in the source text (header is 1) and
    ``None`` for batch-level findings.
    """

    severity: Severity
    code: str
    message: str
    row_number: int | None = None
    field: str | None = None
    value: str | None = None
    suggestion: Suggestion | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass(frozen=True)
class ValidationReport:
    """
    End-of-run validation result.

    ``records`` holds only rows without any error-level finding, already
    corrected. ``stages`` is the path the run took through the pipeline.
    """

    stage: PipelineStage
    stages: tuple[PipelineStage, ...]
    total_rows: int
    valid_rows: int
    invalid_rows: int
    warned_rows: int
    findings: tuple[Finding, ...] = field(default_factory=tuple)
    records: tuple[BudgetRecord, ...] = field(default_factory=tuple)

    @property
    def errors(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.ERROR)

    @property
    def warnings(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.WARNING)

    @property
    def suggestions(self) -> tuple[Finding, ...]:
        return tuple(f for f in self.findings if f.severity is Severity.SUGGESTION)

    @property
    def corrections_applied(self) -> int:
        return sum(
            1
            for f in self.findings
            if f.suggestion is not None and f.suggestion.applied
        )

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class BudgetImportSummary:
    """
    Application-level outcome of one upload.

    ``reported_findings`` is the report's finding list capped for transport.
    """

    report: ValidationReport
    reported_findings: tuple[Finding, ...]
    inserted: int = 0
    persisted: bool = False

    @property
    def findings_truncated(self) -> bool:
        return len(self.reported_findings) < len(self.report.findings)
