"""
tests/test_field_validator.py

Pytest unit tests for FieldValidator.

Rows are produced by RowParser from CSV text so header lookups run through
the same path as a real import.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from app.config import BudgetCSVSettings
from app.domain.budget import Confidence, Severity, Strictness
from app.parsers.row_parser import RowParser
from app.validators.field_validator import FieldValidationResult, FieldValidator


@pytest.fixture()
def validate(make_csv: Callable[..., str]) -> Callable[..., FieldValidationResult]:
    def _validate(settings: BudgetCSVSettings | None = None, **cells: str) -> FieldValidationResult:
        table = RowParser().parse(make_csv(cells))
        validator = FieldValidator(settings=settings or BudgetCSVSettings())
        return validator.validate_row(row=table.rows[0], header_map=table.header_map)

    return _validate


def _codes(result: FieldValidationResult) -> list[tuple[str, str | None]]:
    return [(finding.code, finding.field) for finding in result.findings]


# ---------------------------------------------------------------------------
# Clean rows
# ---------------------------------------------------------------------------


def test_clean_row_produces_typed_record(validate, make_record) -> None:
    result = validate()

    assert result.findings == []
    assert not result.has_errors
    assert result.record == make_record()
    assert result.row_number == 2


def test_boolean_tokens_are_case_insensitive(validate) -> None:
    result = validate(**{"Inclui Entrega": "YES", "Inclui Película": "Nao"})

    assert result.record.includes_delivery is True
    assert result.record.includes_screen_protector is False


def test_blank_optional_fields_become_none(validate) -> None:
    result = validate(**{"Qualidade": "  "})

    assert result.record.quality is None
    assert result.record.notes is None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_required_field_missing(validate) -> None:
    result = validate(**{"Tipo Aparelho": ""})

    assert _codes(result) == [("required", "device_type")]
    assert result.has_errors
    assert result.record.device_type == ""


def test_non_numeric_price(validate) -> None:
    result = validate(**{"Preço à vista": "abc"})

    assert _codes(result) == [("invalid_number", "cash_price")]
    assert result.findings[0].value == "abc"
    assert result.record.cash_price == 0


def test_zero_price_is_an_error(validate) -> None:
    result = validate(**{"Preço à vista": "0"})

    assert _codes(result) == [("non_positive_price", "cash_price")]


@pytest.mark.parametrize(
    ("raw", "code"),
    [("0", "out_of_range"), ("-1", "negative_value"), ("2,5", "invalid_integer"), ("x", "invalid_number")],
)
def test_installment_count_rules(validate, raw: str, code: str) -> None:
    result = validate(**{"Parcelas": raw})

    assert _codes(result) == [(code, "installment_count")]
    assert result.record.installment_count == 1


def test_negative_warranty(validate) -> None:
    result = validate(**{"Garantia (meses)": "-3"})

    assert _codes(result) == [("negative_value", "warranty_months")]


def test_unknown_boolean_token(validate) -> None:
    result = validate(**{"Inclui Entrega": "talvez"})

    assert _codes(result) == [("invalid_boolean", "includes_delivery")]


# ---------------------------------------------------------------------------
# Warnings and suggestions
# ---------------------------------------------------------------------------


def test_low_price_is_a_warning(validate) -> None:
    result = validate(**{"Preço à vista": "5"})

    assert _codes(result) == [("price_too_low", "cash_price")]
    assert not result.has_errors
    assert result.record.cash_price == 500


def test_scale_correction_applied_in_lenient_mode(validate) -> None:
    result = validate(**{"Preço à vista": "45000", "Preço Parcelado": "50000"})

    assert [finding.severity for finding in result.findings] == [
        Severity.WARNING,
        Severity.SUGGESTION,
        Severity.WARNING,
        Severity.SUGGESTION,
    ]
    suggestion = result.findings[1].suggestion
    assert suggestion is not None
    assert suggestion.original_value == "45000"
    assert suggestion.suggested_value == "450"
    assert suggestion.confidence is Confidence.MEDIUM
    assert suggestion.auto_applicable is True
    assert suggestion.applied is True
    assert result.record.cash_price == 45_000
    assert result.record.installment_price == 50_000
    assert result.raw_prices == [45_000, 50_000]


def test_scale_correction_only_reported_in_strict_mode(validate) -> None:
    settings = BudgetCSVSettings(strictness=Strictness.STRICT)
    result = validate(settings=settings, **{"Preço à vista": "45000"})

    suggestion = result.findings[1].suggestion
    assert suggestion is not None
    assert suggestion.applied is False
    assert result.record.cash_price == 4_500_000


def test_huge_price_is_not_scale_corrected(validate) -> None:
    result = validate(**{"Preço à vista": "2000000", "Preço Parcelado": "2000000"})

    assert _codes(result) == [("price_too_high", "cash_price"), ("price_too_high", "installment_price")]
    assert result.record.cash_price == 200_000_000


def test_payment_method_without_accents_is_auto_corrected(validate) -> None:
    result = validate(**{"Método de Pagamento": "Cartao de Credito"})

    assert _codes(result) == [
        ("unknown_category", "payment_method"),
        ("category_suggestion", "payment_method"),
    ]
    suggestion = result.findings[1].suggestion
    assert suggestion is not None
    assert suggestion.confidence is Confidence.HIGH
    assert suggestion.auto_applicable is True
    assert suggestion.applied is True
    assert result.record.payment_method == "Cartão de Crédito"


def test_device_type_suggestion_is_never_auto_applied(validate) -> None:
    result = validate(**{"Tipo Aparelho": "Celulr"})

    suggestion = result.findings[1].suggestion
    assert suggestion is not None
    assert suggestion.suggested_value == "Celular"
    assert suggestion.confidence is Confidence.HIGH
    assert suggestion.auto_applicable is False
    assert result.record.device_type == "Celulr"


def test_unknown_category_without_suggestion(validate) -> None:
    result = validate(**{"Tipo Aparelho": "Geladeira"})

    assert _codes(result) == [("unknown_category", "device_type")]
    assert result.findings[0].severity is Severity.WARNING
    assert result.record.device_type == "Geladeira"


def test_price_with_decimals_above_threshold_is_not_scale_corrected(validate) -> None:
    result = validate(**{"Preço à vista": "12345,67", "Preço Parcelado": "15000,00"})

    assert result.findings == []
    assert result.record.cash_price == 1_234_567
    assert result.record.installment_price == 1_500_000


def test_oversized_price_is_an_invalid_number(validate) -> None:
    result = validate(**{"Preço à vista": "9" * 30})

    assert _codes(result) == [("invalid_number", "cash_price")]
    assert result.record.cash_price == 0


@pytest.mark.parametrize("raw", ["9" * 30, "2147483648"])
def test_oversized_installment_count_is_an_error(validate, raw: str) -> None:
    result = validate(**{"Parcelas": raw})

    assert result.has_errors
    assert result.findings[0].field == "installment_count"
    assert result.record.installment_count == 1
