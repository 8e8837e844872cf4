"""
app/services/budget_exporter.py

Serializes budget records back into the semicolon-delimited import format.

The output uses the same headers and column order the importer expects, so
re-importing an export yields the same records. Monetary fields are written
in reais: whole amounts without decimals, fractional amounts with two decimals
and a comma. Amounts above the minor-unit threshold always carry two decimals
so the importer never mistakes them for centavos.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from app.config import BudgetCSVSettings
from app.converters.number_formatter import NumberFormatter
from app.converters.scale_converter import ScaleConverter
from app.domain.budget import BudgetRecord
from app.mappers.budget_schema import (
    BUDGET_COLUMNS,
    CSV_DELIMITER,
    EXPORT_FALSE,
    EXPORT_TRUE,
    BudgetColumn,
    FieldKind,
)
from app.validators.categorical_matcher import fold

logger = logging.getLogger(__name__)

_QUOTE = '"'

TEMPLATE_EXAMPLE = BudgetRecord(
    device_type="Celular",
    service_description="Tela iPhone 11",
    quality="Gold",
    notes="Com mensagem de peça não genuína",
    cash_price=75_000,
    installment_price=80_000,
    installment_count=10,
    payment_method="Cartão de Crédito",
    warranty_months=6,
    validity_days=15,
    includes_delivery=True,
    includes_screen_protector=True,
)


@dataclass(frozen=True)
class ExportFilters:
    """
    Conjunctive export criteria. ``None`` means "do not filter on this".

    Price bounds are in reais; the other ranges are inclusive.
    """

    device_types: tuple[str, ...] | None = None
    payment_methods: tuple[str, ...] | None = None
    min_warranty_months: int | None = None
    max_warranty_months: int | None = None
    min_validity_days: int | None = None
    max_validity_days: int | None = None
    min_cash_price: Decimal | None = None
    max_cash_price: Decimal | None = None
    includes_delivery: bool | None = None
    includes_screen_protector: bool | None = None

    def matches(self, record: BudgetRecord, *, scale: ScaleConverter) -> bool:
        if self.device_types is not None and not _folded_in(
            record.device_type, self.device_types
        ):
            return False
        if self.payment_methods is not None and not _folded_in(
            record.payment_method, self.payment_methods
        ):
            return False
        if not _within(record.warranty_months, self.min_warranty_months, self.max_warranty_months):
            return False
        if not _within(record.validity_days, self.min_validity_days, self.max_validity_days):
            return False

        cash_major = scale.to_major_exact(record.cash_price)
        if not _within(cash_major, self.min_cash_price, self.max_cash_price):
            return False

        if (
            self.includes_delivery is not None
            and record.includes_delivery is not self.includes_delivery
        ):
            return False
        if (
            self.includes_screen_protector is not None
            and record.includes_screen_protector is not self.includes_screen_protector
        ):
            return False
        return True


class BudgetExporter:
    """
    Renders records as budget CSV text.
    """

    def __init__(
        self,
        *,
        settings: BudgetCSVSettings | None = None,
        formatter: NumberFormatter | None = None,
        scale_converter: ScaleConverter | None = None,
    ) -> None:
        self._settings = settings or BudgetCSVSettings()
        self._formatter = formatter or NumberFormatter()
        self._scale = scale_converter or ScaleConverter(
            minor_unit_threshold=self._settings.minor_unit_threshold,
        )

    def export(
        self,
        records: Iterable[BudgetRecord],
        filters: ExportFilters | None = None,
    ) -> str:
        """
        Return the header row followed by one line per (matching) record.
        """

        selected = [
            record
            for record in records
            if filters is None or filters.matches(record, scale=self._scale)
        ]
        lines = [self._join(column.header for column in BUDGET_COLUMNS)]
        lines.extend(self._render_record(record) for record in selected)
        return "\n".join(lines)

    def generate_template(self) -> str:
        """
        Header row plus one example row that imports without findings.
        """

        return self.export([TEMPLATE_EXAMPLE])

    def _render_record(self, record: BudgetRecord) -> str:
        return self._join(
            self._render_value(column, getattr(record, column.field_name))
            for column in BUDGET_COLUMNS
        )

    def _render_value(self, column: BudgetColumn, value: object) -> str:
        kind = column.kind
        if value is None:
            return ""
        if kind is FieldKind.MONEY:
            return self._render_money(column, int(value))
        if kind is FieldKind.BOOLEAN:
            return EXPORT_TRUE if value else EXPORT_FALSE
        if kind is FieldKind.INTEGER:
            return str(int(value))
        return str(value)

    def _render_money(self, column: BudgetColumn, minor_units: int) -> str:
        if self._scale.to_major_units_checked(minor_units).low_confidence:
            logger.warning(
                "Exporting %s below one real (%s centavos); the stored amount may be in reais",
                column.field_name,
                minor_units,
            )

        amount = self._scale.to_major_exact(minor_units)
        # Amounts over the threshold keep ",00" so re-import never reads them as centavos.
        return self._formatter.format(
            amount,
            force_integer=self._settings.export_force_integer,
            keep_decimals=amount > self._scale.minor_unit_threshold,
        )

    @staticmethod
    def _join(cells: Iterable[str]) -> str:
        return CSV_DELIMITER.join(_escape_cell(cell) for cell in cells)


def _escape_cell(value: str) -> str:
    # The import dialect has no quote escape and reads line by line.
    cleaned = value.replace(_QUOTE, "'").replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    if CSV_DELIMITER in cleaned:
        return f"{_QUOTE}{cleaned}{_QUOTE}"
    return cleaned


def _folded_in(value: str, options: Sequence[str]) -> bool:
    folded = fold(value)
    return any(fold(option) == folded for option in options)


def _within(value: int | Decimal, minimum: int | Decimal | None, maximum: int | Decimal | None) -> bool:
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def export_records(
    records: Sequence[BudgetRecord],
    *,
    settings: BudgetCSVSettings | None = None,
    filters: ExportFilters | None = None,
) -> str:
    """
    Convenience entry point over a default-configured exporter.
    """

    return BudgetExporter(settings=settings).export(records, filters)


def generate_template(*, settings: BudgetCSVSettings | None = None) -> str:
    return BudgetExporter(settings=settings).generate_template()
