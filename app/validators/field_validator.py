"""
app/validators/field_validator.py

Per-field validation and typing of one parsed budget row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from app.config import BudgetCSVSettings
from app.converters.number_formatter import NumberFormatter
from app.converters.scale_converter import Scale, ScaleConverter
from app.domain.budget import (
    BudgetRecord,
    Confidence,
    Finding,
    Severity,
    Strictness,
    Suggestion,
)
from app.mappers.budget_schema import (
    DEVICE_TYPES,
    FALSE_TOKENS,
    PAYMENT_METHODS,
    TRUE_TOKENS,
    header_for,
)
from app.parsers.row_parser import ParsedRow
from app.validators.categorical_matcher import CategoricalMatcher

# Upper bound of the PostgreSQL INTEGER columns the counts are stored in.
MAX_INTEGER_VALUE = 2_147_483_647


@dataclass
class FieldValidationResult:
    """
    Typed record for one row plus everything found while typing it.

    ``record`` carries placeholder values for fields that failed; callers must
    check ``has_errors`` before trusting it. ``raw_prices`` are the parsed
    monetary numbers before any scale correction.
    """

    row_number: int
    record: BudgetRecord
    findings: list[Finding] = field(default_factory=list)
    raw_prices: list[Decimal] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(finding.is_error for finding in self.findings)


class FieldValidator:
    """
    Validates and parses the cells of one budget row.
    """

    def __init__(
        self,
        *,
        settings: BudgetCSVSettings | None = None,
        formatter: NumberFormatter | None = None,
        scale_converter: ScaleConverter | None = None,
        device_matcher: CategoricalMatcher | None = None,
        payment_matcher: CategoricalMatcher | None = None,
    ) -> None:
        self._settings = settings or BudgetCSVSettings()
        self._formatter = formatter or NumberFormatter()
        self._scale = scale_converter or ScaleConverter(
            minor_unit_threshold=self._settings.minor_unit_threshold,
        )
        self._device_matcher = device_matcher or CategoricalMatcher(
            DEVICE_TYPES,
            max_distance=self._settings.max_edit_distance,
        )
        self._payment_matcher = payment_matcher or CategoricalMatcher(
            PAYMENT_METHODS,
            max_distance=self._settings.max_edit_distance,
        )

    @property
    def _lenient(self) -> bool:
        return self._settings.strictness is Strictness.LENIENT

    def validate_row(
        self,
        *,
        row: ParsedRow,
        header_map: dict[str, int],
    ) -> FieldValidationResult:
        """
        Validate and type one row.
        """

        findings: list[Finding] = []
        raw_prices: list[Decimal] = []
        row_number = row.row_number

        def cell(field_name: str) -> str:
            return row.get(header_map, header_for(field_name))

        device_type = self._parse_required_text(
            value=cell("device_type"),
            row_number=row_number,
            field_name="device_type",
            findings=findings,
        )
        service_description = self._parse_required_text(
            value=cell("service_description"),
            row_number=row_number,
            field_name="service_description",
            findings=findings,
        )
        quality = self._parse_optional_text(cell("quality"))
        notes = self._parse_optional_text(cell("notes"))

        cash_price = self._parse_money(
            value=cell("cash_price"),
            row_number=row_number,
            field_name="cash_price",
            findings=findings,
            raw_prices=raw_prices,
        )
        installment_price = self._parse_money(
            value=cell("installment_price"),
            row_number=row_number,
            field_name="installment_price",
            findings=findings,
            raw_prices=raw_prices,
        )
        installment_count = self._parse_integer(
            value=cell("installment_count"),
            row_number=row_number,
            field_name="installment_count",
            minimum=1,
            findings=findings,
        )
        payment_method = self._parse_required_text(
            value=cell("payment_method"),
            row_number=row_number,
            field_name="payment_method",
            findings=findings,
        )
        warranty_months = self._parse_integer(
            value=cell("warranty_months"),
            row_number=row_number,
            field_name="warranty_months",
            minimum=0,
            findings=findings,
        )
        validity_days = self._parse_integer(
            value=cell("validity_days"),
            row_number=row_number,
            field_name="validity_days",
            minimum=0,
            findings=findings,
        )
        includes_delivery = self._parse_boolean(
            value=cell("includes_delivery"),
            row_number=row_number,
            field_name="includes_delivery",
            findings=findings,
        )
        includes_screen_protector = self._parse_boolean(
            value=cell("includes_screen_protector"),
            row_number=row_number,
            field_name="includes_screen_protector",
            findings=findings,
        )

        if device_type:
            device_type = self._validate_category(
                value=device_type,
                row_number=row_number,
                field_name="device_type",
                matcher=self._device_matcher,
                findings=findings,
            )
        if payment_method:
            payment_method = self._validate_category(
                value=payment_method,
                row_number=row_number,
                field_name="payment_method",
                matcher=self._payment_matcher,
                findings=findings,
            )

        record = BudgetRecord(
            device_type=device_type,
            service_description=service_description,
            quality=quality,
            notes=notes,
            cash_price=cash_price,
            installment_price=installment_price,
            installment_count=installment_count,
            payment_method=payment_method,
            warranty_months=warranty_months,
            validity_days=validity_days,
            includes_delivery=includes_delivery,
            includes_screen_protector=includes_screen_protector,
        )
        return FieldValidationResult(
            row_number=row_number,
            record=record,
            findings=findings,
            raw_prices=raw_prices,
        )

    def _parse_required_text(
        self,
        *,
        value: str,
        row_number: int,
        field_name: str,
        findings: list[Finding],
    ) -> str:
        if self._is_blank(value):
            findings.append(self._required_error(row_number=row_number, field_name=field_name))
            return ""
        return value.strip()

    @staticmethod
    def _parse_optional_text(value: str) -> str | None:
        stripped = value.strip()
        return stripped or None

    def _parse_money(
        self,
        *,
        value: str,
        row_number: int,
        field_name: str,
        findings: list[Finding],
        raw_prices: list[Decimal],
    ) -> int:
        if self._is_blank(value):
            findings.append(self._required_error(row_number=row_number, field_name=field_name))
            return 0

        parsed = self._formatter.parse(value)
        if not parsed.ok:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="invalid_number",
                    message=f"{header_for(field_name)} must be a valid number.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return 0

        if parsed.value <= 0:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="non_positive_price",
                    message=f"{header_for(field_name)} must be greater than zero.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return 0

        raw_prices.append(parsed.value)
        minor_units = self._scale.to_minor_units(parsed.value)

        conversion = self._scale.normalize_to_minor(parsed.value)
        if conversion.detected_scale is Scale.MINOR_UNIT:
            suggested_major = self._formatter.format(
                self._scale.to_major_exact(conversion.value),
            )
            applied = self._lenient
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    code="scale_correction",
                    message=(
                        f"{header_for(field_name)} looks like it was entered in centavos "
                        f"({value}); the amount in reais would be {suggested_major}."
                    ),
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            findings.append(
                Finding(
                    severity=Severity.SUGGESTION,
                    code="scale_correction",
                    message=f"Use {suggested_major} as the amount in reais.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                    suggestion=Suggestion(
                        original_value=value,
                        suggested_value=suggested_major,
                        confidence=Confidence.MEDIUM,
                        auto_applicable=True,
                        reason="Value exceeds the expected magnitude for reais.",
                        applied=applied,
                    ),
                )
            )
            if applied:
                minor_units = conversion.value

        major_amount = self._scale.to_major_exact(minor_units)
        if major_amount < self._settings.min_plausible_price:
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    code="price_too_low",
                    message=(
                        f"{header_for(field_name)} is very low ({value}). "
                        "Check that it is correct."
                    ),
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
        elif major_amount > self._settings.max_plausible_price:
            findings.append(
                Finding(
                    severity=Severity.WARNING,
                    code="price_too_high",
                    message=(
                        f"{header_for(field_name)} is very high ({value}). "
                        "Check that it is correct."
                    ),
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )

        return minor_units

    def _parse_integer(
        self,
        *,
        value: str,
        row_number: int,
        field_name: str,
        minimum: int,
        findings: list[Finding],
    ) -> int:
        if self._is_blank(value):
            findings.append(self._required_error(row_number=row_number, field_name=field_name))
            return minimum

        parsed = self._formatter.parse(value)
        if not parsed.ok:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="invalid_number",
                    message=f"{header_for(field_name)} must be a valid number.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return minimum

        if not parsed.is_integral:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="invalid_integer",
                    message=f"{header_for(field_name)} must be a whole number.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return minimum

        number = int(parsed.value)
        if number < minimum:
            code = "negative_value" if number < 0 else "out_of_range"
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code=code,
                    message=f"{header_for(field_name)} must be at least {minimum}.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return minimum

        if number > MAX_INTEGER_VALUE:
            findings.append(
                Finding(
                    severity=Severity.ERROR,
                    code="out_of_range",
                    message=f"{header_for(field_name)} must be at most {MAX_INTEGER_VALUE}.",
                    row_number=row_number,
                    field=field_name,
                    value=value,
                )
            )
            return minimum

        return number

    def _parse_boolean(
        self,
        *,
        value: str,
        row_number: int,
        field_name: str,
        findings: list[Finding],
    ) -> bool:
        if self._is_blank(value):
            findings.append(self._required_error(row_number=row_number, field_name=field_name))
            return False

        token = value.strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS:
            return False

        findings.append(
            Finding(
                severity=Severity.ERROR,
                code="invalid_boolean",
                message=f"{header_for(field_name)} must be 'sim' or 'não'.",
                row_number=row_number,
                field=field_name,
                value=value,
            )
        )
        return False

    def _validate_category(
        self,
        *,
        value: str,
        row_number: int,
        field_name: str,
        matcher: CategoricalMatcher,
        findings: list[Finding],
    ) -> str:
        match = matcher.match(value)
        if match is not None and match.is_exact:
            return value

        findings.append(
            Finding(
                severity=Severity.WARNING,
                code="unknown_category",
                message=f'{header_for(field_name)} not recognized: "{value}".',
                row_number=row_number,
                field=field_name,
                value=value,
            )
        )
        if match is None:
            return value

        auto_applicable = field_name == "payment_method" and match.confidence is Confidence.HIGH
        applied = auto_applicable and self._lenient
        findings.append(
            Finding(
                severity=Severity.SUGGESTION,
                code="category_suggestion",
                message=f'Similar value found: "{match.value}".',
                row_number=row_number,
                field=field_name,
                value=value,
                suggestion=Suggestion(
                    original_value=value,
                    suggested_value=match.value,
                    confidence=match.confidence,
                    auto_applicable=auto_applicable,
                    reason=f"Matched by {match.strategy.value} (distance {match.distance}).",
                    applied=applied,
                ),
            )
        )
        return match.value if applied else value

    @staticmethod
    def _required_error(*, row_number: int, field_name: str) -> Finding:
        return Finding(
            severity=Severity.ERROR,
            code="required",
            message=f"Required value '{header_for(field_name)}' is missing.",
            row_number=row_number,
            field=field_name,
            value="",
        )

    @staticmethod
    def _is_blank(value: str | None) -> bool:
        return value is None or str(value).strip() == ""
