"""
tests/test_record_validator.py

Pytest unit tests for RecordValidator: cross-field invariants, plausibility
warnings, duplicate detection and batch scale analysis.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.config import BudgetCSVSettings
from app.domain.budget import Severity
from app.validators.record_validator import RecordValidator, duplicate_key, is_cash_payment


@pytest.fixture()
def validator() -> RecordValidator:
    return RecordValidator(settings=BudgetCSVSettings())


# ---------------------------------------------------------------------------
# Cross-field
# ---------------------------------------------------------------------------


class TestCrossField:
    def test_installment_below_cash_is_an_error(self, validator, make_record) -> None:
        record = make_record(cash_price=50_000, installment_price=40_000)

        findings = validator.validate_record(row_number=2, record=record)

        assert [(f.code, f.field, f.severity) for f in findings] == [
            ("installment_below_cash", "installment_price", Severity.ERROR)
        ]

    def test_installment_above_cash_is_fine(self, validator, make_record) -> None:
        record = make_record(cash_price=50_000, installment_price=60_000)

        assert validator.validate_record(row_number=2, record=record) == []

    def test_cash_payment_with_installments_is_an_error(self, validator, make_record) -> None:
        record = make_record(payment_method="À Vista", installment_count=3)

        findings = validator.validate_record(row_number=2, record=record)

        assert [(f.code, f.field) for f in findings] == [
            ("cash_with_installments", "installment_count")
        ]

    def test_cash_payment_with_one_installment_is_fine(self, validator, make_record) -> None:
        record = make_record(payment_method="Dinheiro", installment_count=1)

        assert validator.validate_record(row_number=2, record=record) == []

    def test_cash_detection_ignores_accents(self) -> None:
        assert is_cash_payment("a vista")
        assert is_cash_payment("DINHEIRO")
        assert not is_cash_payment("PIX")


# ---------------------------------------------------------------------------
# Plausibility
# ---------------------------------------------------------------------------


class TestPlausibility:
    def test_limits_are_inclusive(self, validator, make_record) -> None:
        record = make_record(warranty_months=24, validity_days=90)

        assert validator.validate_record(row_number=2, record=record) == []

    def test_long_warranty_and_validity_are_warnings(self, validator, make_record) -> None:
        record = make_record(warranty_months=25, validity_days=91)

        findings = validator.validate_record(row_number=7, record=record)

        assert [(f.code, f.field, f.severity) for f in findings] == [
            ("out_of_range", "warranty_months", Severity.WARNING),
            ("out_of_range", "validity_days", Severity.WARNING),
        ]
        assert all(f.row_number == 7 for f in findings)

    def test_limits_follow_settings(self, make_record) -> None:
        validator = RecordValidator(settings=BudgetCSVSettings(max_warranty_months=36))

        assert validator.validate_record(row_number=2, record=make_record(warranty_months=30)) == []


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------


class TestDuplicates:
    def test_every_repeat_after_first_is_flagged(self, validator, make_record) -> None:
        record = make_record()

        findings = validator.find_duplicates([(2, record), (3, record), (5, record)])

        assert [f.row_number for f in findings] == [3, 5]
        assert all(f.code == "duplicate" and f.is_error for f in findings)
        assert findings[0].message == "Duplicate of row 2."
        assert findings[0].value == duplicate_key(record)

    def test_key_ignores_case_and_accents(self, validator, make_record) -> None:
        first = make_record(device_type="Relógio", service_description="Troca de Bateria")
        second = make_record(device_type="relogio", service_description="troca de bateria")

        findings = validator.find_duplicates([(2, first), (3, second)])

        assert len(findings) == 1

    def test_different_cash_price_is_not_a_duplicate(self, validator, make_record) -> None:
        findings = validator.find_duplicates(
            [(2, make_record()), (3, make_record(cash_price=46_000, installment_price=50_000))]
        )

        assert findings == []

    def test_validate_batch_runs_record_checks_then_duplicates(self, validator, make_record) -> None:
        bad = make_record(cash_price=50_000, installment_price=40_000)

        findings = validator.validate_batch([(2, bad), (3, bad)])

        assert [f.code for f in findings] == [
            "installment_below_cash",
            "installment_below_cash",
            "duplicate",
        ]


# ---------------------------------------------------------------------------
# Batch scale analysis
# ---------------------------------------------------------------------------


class TestAnalyzeScale:
    def test_warns_when_most_prices_look_like_centavos(self, validator) -> None:
        prices = [Decimal(20_000)] * 9 + [Decimal(100)]

        finding = validator.analyze_scale(prices)

        assert finding is not None
        assert finding.code == "batch_scale"
        assert finding.severity is Severity.WARNING
        assert finding.row_number is None
        assert finding.field == "batch"
        assert finding.value == "9/10"

    def test_ratio_must_be_exceeded(self, validator) -> None:
        prices = [Decimal(20_000)] * 8 + [Decimal(100)] * 2

        assert validator.analyze_scale(prices) is None

    def test_empty_batch(self, validator) -> None:
        assert validator.analyze_scale([]) is None

    def test_prices_written_with_decimals_are_not_counted(self, validator) -> None:
        prices = [Decimal("15000.00")] * 9 + [Decimal(100)]

        assert validator.analyze_scale(prices) is None
