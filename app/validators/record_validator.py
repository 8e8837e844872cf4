"""
app/validators/record_validator.py

Cross-field and cross-row checks over typed budget records.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from app.config import BudgetCSVSettings
from app.converters.scale_converter import Scale, ScaleConverter
from app.domain.budget import BudgetRecord, Finding, Severity
from app.mappers.budget_schema import CASH_PAYMENT_METHODS
from app.validators.categorical_matcher import fold

_CASH_METHODS_FOLDED = frozenset(fold(method) for method in CASH_PAYMENT_METHODS)


def is_cash_payment(payment_method: str) -> bool:
    return fold(payment_method) in _CASH_METHODS_FOLDED


def duplicate_key(record: BudgetRecord) -> str:
    """
    Composite identity used for duplicate detection.
    """

    return "|".join(
        (
            fold(record.device_type),
            fold(record.service_description),
            str(record.cash_price),
        )
    )


class RecordValidator:
    """
    Validates invariants that span fields of one record or records of a batch.
    """

    def __init__(
        self,
        *,
        settings: BudgetCSVSettings | None = None,
        scale_converter: ScaleConverter | None = None,
    ) -> None:
        self._settings = settings or BudgetCSVSettings()
        self._scale = scale_converter or ScaleConverter(
            minor_unit_threshold=self._settings.minor_unit_threshold,
        )

    def validate_batch(
        self,
        records: Sequence[tuple[int, BudgetRecord]],
    ) -> list[Finding]:
        """
        Run every record-level check, then duplicate detection.

        ``records`` pairs each record with its source row number.
        """

        findings: list[Finding] = []
        for row_number, record in records:
            findings.extend(self.validate_record(row_number=row_number, record=record))
        findings.extend(self.find_duplicates(records))
        return findings

    def validate_record(self, *, row_number: int, record: BudgetRecord) -> list[Finding]:
        findings: list[Finding] = []

        if record.installment_price < record.cash_price:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="installment_below_cash",
                    message="Installment price cannot be lower than the cash price.",
                    row_number=row_number,
                    field="installment_price",
                    value=str(record.installment_price),
                )
            )

        if is_cash_payment(record.payment_method) and record.installment_count > 1:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="cash_with_installments",
                    message=(
                        "Cash payment must have exactly 1 installment, "
                        f"found {record.installment_count}."
                    ),
                    row_number=row_number,
                    field="installment_count",
                    value=str(record.installment_count),
                )
            )

        if record.warranty_months > self._settings.max_warranty_months:
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    code="out_of_range",
                    message=(
                        f"Warranty is unusually long: {record.warranty_months} months. "
                        "Check that it is correct."
                    ),
                    row_number=row_number,
                    field="warranty_months",
                    value=str(record.warranty_months),
                )
            )

        if record.validity_days > self._settings.max_validity_days:
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    code="out_of_range",
                    message=(
                        f"Validity is unusually long: {record.validity_days} days. "
                        "Check that it is correct."
                    ),
                    row_number=row_number,
                    field="validity_days",
                    value=str(record.validity_days),
                )
            )

        return findings

    def find_duplicates(
        self,
        records: Sequence[tuple[int, BudgetRecord]],
    ) -> list[Finding]:
        """
        Flag every repeat of a composite key after its first occurrence.
        """

        findings: list[Finding] = []
        first_seen: dict[str, int] = {}

        for row_number, record in records:
            key = duplicate_key(record)
            if key in first_seen:
                findings.append(
                    Finding(
                        severity=Severity.ERROR,
                        code="duplicate",
                        message=f"Duplicate of row {first_seen[key]}.",
                        row_number=row_number,
                        field="duplicate",
                        value=key,
                    )
                )
                continue
            first_seen[key] = row_number

        return findings

    def analyze_scale(self, raw_prices: Sequence[Decimal]) -> Finding | None:
        """
        Emit one batch-level warning when most prices look like centavos.
        """

        prices = [price for price in raw_prices if price > 0]
        if not prices:
            return None

        suspicious = sum(
            1 for price in prices if self._scale.detect_scale(price) is Scale.MINOR_UNIT
        )
        if suspicious <= len(prices) * self._settings.batch_scale_ratio:
            return None

        return Finding(
            severity=Severity.WARNING,
            code="batch_scale",
            message=(
                f"{suspicious}/{len(prices)} prices look like they were entered in centavos. "
                "Check the unit used for the whole file."
            ),
            row_number=None,
            field="batch",
            value=f"{suspicious}/{len(prices)}",
        )
