"""
tests/conftest.py

Shared builders for budget CSV text and records.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

import pytest

from app.domain.budget import BudgetRecord
from app.mappers.budget_schema import EXPORT_HEADERS

DEFAULT_CELLS: dict[str, str] = {
    "Tipo Aparelho": "Celular",
    "Serviço/Aparelho": "Troca de tela",
    "Qualidade": "Original",
    "Observações": "",
    "Preço à vista": "450",
    "Preço Parcelado": "500",
    "Parcelas": "5",
    "Método de Pagamento": "Cartão de Crédito",
    "Garantia (meses)": "3",
    "Validade (dias)": "30",
    "Inclui Entrega": "não",
    "Inclui Película": "sim",
}

DEFAULT_RECORD = BudgetRecord(
    device_type="Celular",
    service_description="Troca de tela",
    quality="Original",
    notes=None,
    cash_price=45_000,
    installment_price=50_000,
    installment_count=5,
    payment_method="Cartão de Crédito",
    warranty_months=3,
    validity_days=30,
    includes_delivery=False,
    includes_screen_protector=True,
)


def build_csv(*rows: dict[str, str], headers: tuple[str, ...] = EXPORT_HEADERS) -> str:
    """
    Render rows as budget CSV; each row overrides DEFAULT_CELLS by header.
    """

    lines = [";".join(headers)]
    for overrides in rows:
        cells = {**DEFAULT_CELLS, **overrides}
        lines.append(";".join(cells.get(header, "") for header in headers))
    return "\n".join(lines)


@pytest.fixture()
def make_csv() -> Callable[..., str]:
    return build_csv


@pytest.fixture()
def make_record() -> Callable[..., BudgetRecord]:
    def _make(**overrides: object) -> BudgetRecord:
        return replace(DEFAULT_RECORD, **overrides)

    return _make
