"""
app/mappers/budget_schema.py

Column catalogue for the budget CSV format and the record -> ORM mapping.

The header names are the exact strings written on export and required on
import; their order here is the export column order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.domain.budget import BudgetRecord
from db.models.budget import Budget

CSV_DELIMITER = ";"


class FieldKind(str, Enum):
    TEXT = "text"
    MONEY = "money"
    INTEGER = "integer"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class BudgetColumn:
    """
    One CSV column and the record field it feeds.
    """

    header: str
    field_name: str
    kind: FieldKind
    required: bool = True


BUDGET_COLUMNS: tuple[BudgetColumn, ...] = (
    BudgetColumn("Tipo Aparelho", "device_type", FieldKind.TEXT),
    BudgetColumn("Serviço/Aparelho", "service_description", FieldKind.TEXT),
    BudgetColumn("Qualidade", "quality", FieldKind.TEXT, required=False),
    BudgetColumn("Observações", "notes", FieldKind.TEXT, required=False),
    BudgetColumn("Preço à vista", "cash_price", FieldKind.MONEY),
    BudgetColumn("Preço Parcelado", "installment_price", FieldKind.MONEY),
    BudgetColumn("Parcelas", "installment_count", FieldKind.INTEGER),
    BudgetColumn("Método de Pagamento", "payment_method", FieldKind.TEXT),
    BudgetColumn("Garantia (meses)", "warranty_months", FieldKind.INTEGER),
    BudgetColumn("Validade (dias)", "validity_days", FieldKind.INTEGER),
    BudgetColumn("Inclui Entrega", "includes_delivery", FieldKind.BOOLEAN),
    BudgetColumn("Inclui Película", "includes_screen_protector", FieldKind.BOOLEAN),
)

EXPORT_HEADERS: tuple[str, ...] = tuple(column.header for column in BUDGET_COLUMNS)

REQUIRED_HEADERS: tuple[str, ...] = tuple(
    column.header for column in BUDGET_COLUMNS if column.required
)

COLUMNS_BY_FIELD: dict[str, BudgetColumn] = {
    column.field_name: column for column in BUDGET_COLUMNS
}

DEVICE_TYPES: tuple[str, ...] = (
    "Celular",
    "Smartphone",
    "iPhone",
    "Android",
    "Tablet",
    "iPad",
    "Notebook",
    "Laptop",
    "Smartwatch",
    "Relógio",
    "Fone",
    "Earbuds",
)

PAYMENT_METHODS: tuple[str, ...] = (
    "À Vista",
    "Cartão de Crédito",
    "Cartão de Débito",
    "PIX",
    "Dinheiro",
    "Transferência",
    "Parcelado",
)

# Payment methods that settle in a single installment.
CASH_PAYMENT_METHODS: tuple[str, ...] = ("À Vista", "Dinheiro")

TRUE_TOKENS: frozenset[str] = frozenset({"sim", "yes", "true"})
FALSE_TOKENS: frozenset[str] = frozenset({"não", "nao", "no", "false"})

EXPORT_TRUE = "sim"
EXPORT_FALSE = "não"


def header_for(field_name: str) -> str:
    """
    Return the CSV header that feeds ``field_name``.
    """

    return COLUMNS_BY_FIELD[field_name].header


def from_budget_model(model: Budget) -> BudgetRecord:
    """
    Convert a persisted ``budgets`` row back into a record for export.
    """

    return BudgetRecord(
        device_type=model.device_type,
        service_description=model.service_description,
        quality=model.quality,
        notes=model.notes,
        cash_price=model.cash_price,
        installment_price=model.installment_price,
        installment_count=model.installment_count,
        payment_method=model.payment_method,
        warranty_months=model.warranty_months,
        validity_days=model.validity_days,
        includes_delivery=model.includes_delivery,
        includes_screen_protector=model.includes_screen_protector,
    )
