"""
tests/test_budget_exporter.py

Pytest tests for BudgetExporter: output format, filters, template and the
export -> import round trip.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from app.config import BudgetCSVSettings
from app.mappers.budget_schema import EXPORT_HEADERS
from app.services.budget_exporter import (
    BudgetExporter,
    ExportFilters,
    export_records,
    generate_template,
)
from app.services.validation_pipeline import validate_and_correct


@pytest.fixture()
def exporter() -> BudgetExporter:
    return BudgetExporter(settings=BudgetCSVSettings())


def _lines(text: str) -> list[str]:
    return text.split("\n")


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class TestFormat:
    def test_header_row_matches_import_headers(self, exporter) -> None:
        assert _lines(exporter.export([]))[0] == ";".join(EXPORT_HEADERS)

    def test_record_line(self, exporter, make_record) -> None:
        line = _lines(exporter.export([make_record()]))[1]

        assert line == "Celular;Troca de tela;Original;;450;500;5;Cartão de Crédito;3;30;não;sim"

    def test_fractional_reais_keep_centavos(self, exporter, make_record) -> None:
        line = _lines(exporter.export([make_record(cash_price=45_050, installment_price=50_001)]))[1]

        assert ";450,50;500,01;" in line

    def test_force_integer_rounds_half_up(self, make_record) -> None:
        exporter = BudgetExporter(settings=BudgetCSVSettings(export_force_integer=True))

        line = _lines(exporter.export([make_record(cash_price=45_050, installment_price=50_049)]))[1]

        assert ";451;500;" in line

    def test_delimiter_in_text_is_quoted(self, exporter, make_record) -> None:
        line = _lines(exporter.export([make_record(notes="Tela; vidro")]))[1]

        assert ';"Tela; vidro";' in line

    def test_quotes_and_line_breaks_are_neutralised(self, exporter, make_record) -> None:
        text = exporter.export([make_record(notes='Peça "original"\nsem caixa')])

        assert len(_lines(text)) == 2
        assert ";Peça 'original' sem caixa;" in text

    def test_amount_above_threshold_keeps_two_decimals(self, exporter, make_record) -> None:
        line = _lines(exporter.export([make_record(cash_price=1_500_000, installment_price=1_234_567)]))[1]

        assert ";15000,00;12345,67;" in line

    def test_amount_below_one_real_is_logged(self, exporter, make_record, caplog) -> None:
        with caplog.at_level("WARNING", logger="app.services.budget_exporter"):
            line = _lines(exporter.export([make_record(cash_price=50, installment_price=50_000)]))[1]

        assert ";0,50;500;" in line
        assert "cash_price below one real" in caplog.text

    def test_no_byte_order_mark(self, exporter, make_record) -> None:
        assert not exporter.export([make_record()]).startswith("\ufeff")


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


def test_export_then_import_returns_same_records(make_record) -> None:
    records = (
        make_record(),
        make_record(
            device_type="iPhone",
            service_description="Troca de bateria",
            quality=None,
            notes="Peça; com garantia",
            cash_price=19_990,
            installment_price=21_990,
            installment_count=1,
            payment_method="PIX",
            warranty_months=0,
            validity_days=7,
            includes_delivery=True,
            includes_screen_protector=False,
        ),
        make_record(
            device_type="Notebook",
            service_description="Limpeza interna",
            cash_price=1_050,
            installment_price=1_050,
            installment_count=1,
            payment_method="Dinheiro",
        ),
    )

    report = validate_and_correct(export_records(records))

    assert report.findings == ()
    assert report.records == records


@pytest.mark.parametrize(
    "centavos",
    [100, 9_900, 999_900, 1_000_000, 1_000_100, 1_500_000, 1_234_567, 200_000_000],
)
def test_round_trip_holds_across_price_magnitudes(make_record, centavos: int) -> None:
    record = make_record(cash_price=centavos, installment_price=centavos)

    report = validate_and_correct(export_records([record]))

    assert report.records == (record,)
    assert report.errors == ()
    assert report.corrections_applied == 0
    assert {f.code for f in report.findings} <= {"price_too_low", "price_too_high"}


def test_round_trip_of_high_value_batch_has_no_scale_findings(make_record) -> None:
    records = tuple(
        make_record(service_description=f"Serviço {index}", cash_price=price, installment_price=price)
        for index, price in enumerate((1_500_000, 2_000_000, 1_234_567, 5_000_050))
    )

    report = validate_and_correct(export_records(records))

    assert report.findings == ()
    assert report.records == records


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    @pytest.fixture()
    def records(self, make_record):
        return [
            make_record(),
            make_record(
                device_type="Tablet",
                service_description="Troca de conector",
                cash_price=20_000,
                installment_price=22_000,
                payment_method="PIX",
                warranty_months=12,
                includes_delivery=True,
            ),
            make_record(
                device_type="Notebook",
                service_description="Formatação",
                cash_price=15_000,
                installment_price=15_000,
                installment_count=1,
                payment_method="Dinheiro",
                validity_days=60,
                includes_screen_protector=False,
            ),
        ]

    def _services(self, exporter: BudgetExporter, records, filters: ExportFilters) -> list[str]:
        lines = _lines(exporter.export(records, filters))[1:]
        return [line.split(";")[1] for line in lines]

    def test_no_filters_exports_everything(self, exporter, records) -> None:
        assert len(_lines(exporter.export(records))) == 4

    def test_device_types_ignore_case_and_accents(self, exporter, records) -> None:
        filters = ExportFilters(device_types=("celular", "TABLET"))

        assert self._services(exporter, records, filters) == ["Troca de tela", "Troca de conector"]

    def test_payment_methods(self, exporter, records) -> None:
        filters = ExportFilters(payment_methods=("pix",))

        assert self._services(exporter, records, filters) == ["Troca de conector"]

    def test_cash_price_range_is_in_reais(self, exporter, records) -> None:
        filters = ExportFilters(min_cash_price=Decimal("150"), max_cash_price=Decimal("200"))

        assert self._services(exporter, records, filters) == ["Troca de conector", "Formatação"]

    def test_ranges_are_inclusive(self, exporter, records) -> None:
        filters = ExportFilters(min_warranty_months=3, max_warranty_months=3)

        assert self._services(exporter, records, filters) == ["Troca de tela", "Formatação"]

    def test_validity_range(self, exporter, records) -> None:
        filters = ExportFilters(min_validity_days=31)

        assert self._services(exporter, records, filters) == ["Formatação"]

    def test_boolean_flags(self, exporter, records) -> None:
        assert self._services(exporter, records, ExportFilters(includes_delivery=True)) == [
            "Troca de conector"
        ]
        assert self._services(exporter, records, ExportFilters(includes_screen_protector=False)) == [
            "Formatação"
        ]

    def test_criteria_are_conjunctive(self, exporter, records) -> None:
        filters = ExportFilters(payment_methods=("PIX", "Dinheiro"), includes_delivery=False)

        assert self._services(exporter, records, filters) == ["Formatação"]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------


def test_template_imports_without_findings() -> None:
    template = generate_template()

    report = validate_and_correct(template)

    assert _lines(template)[0] == ";".join(EXPORT_HEADERS)
    assert len(_lines(template)) == 2
    assert report.findings == ()
    assert report.valid_rows == 1
