"""
tests/test_config.py

Environment-driven settings for budget CSV processing and the database engine.
"""

from __future__ import annotations

import pytest

from app.config import BudgetCSVSettings, get_budget_csv_settings
from app.domain.budget import Strictness
from db.config import normalize_postgres_url, resolve_engine_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_budget_csv_settings.cache_clear()
    yield
    get_budget_csv_settings.cache_clear()


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "BUDGET_CSV_STRICTNESS",
        "BUDGET_CSV_MINOR_UNIT_THRESHOLD",
        "BUDGET_CSV_BATCH_SCALE_RATIO",
        "BUDGET_CSV_MAX_REPORTED_FINDINGS",
        "BUDGET_CSV_EXPORT_FORCE_INTEGER",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_budget_csv_settings()

    assert settings.strictness is BudgetCSVSettings().strictness
    assert settings.minor_unit_threshold == 10_000
    assert settings.batch_scale_ratio == 0.8
    assert settings.export_force_integer is False


def test_strictness_is_case_insensitive(monkeypatch) -> None:
    monkeypatch.setenv("BUDGET_CSV_STRICTNESS", " STRICT ")

    assert get_budget_csv_settings().strictness is Strictness.STRICT


def test_unknown_strictness_falls_back_to_lenient(monkeypatch) -> None:
    monkeypatch.setenv("BUDGET_CSV_STRICTNESS", "paranoid")

    assert get_budget_csv_settings().strictness is Strictness.LENIENT


def test_malformed_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("BUDGET_CSV_MINOR_UNIT_THRESHOLD", "ten thousand")
    monkeypatch.setenv("BUDGET_CSV_BATCH_SCALE_RATIO", "most")

    settings = get_budget_csv_settings()

    assert settings.minor_unit_threshold == 10_000
    assert settings.batch_scale_ratio == 0.8


def test_values_are_clamped(monkeypatch) -> None:
    monkeypatch.setenv("BUDGET_CSV_BATCH_SCALE_RATIO", "1.7")
    monkeypatch.setenv("BUDGET_CSV_MAX_REPORTED_FINDINGS", "0")
    monkeypatch.setenv("BUDGET_CSV_BATCH_SIZE", "-5")

    settings = get_budget_csv_settings()

    assert settings.batch_scale_ratio == 1.0
    assert settings.max_reported_findings == 1
    assert settings.batch_size == 1


def test_boolean_flags(monkeypatch) -> None:
    monkeypatch.setenv("BUDGET_CSV_EXPORT_FORCE_INTEGER", "yes")
    monkeypatch.setenv("BUDGET_CSV_LOG_FINDINGS", "off")

    settings = get_budget_csv_settings()

    assert settings.export_force_integer is True
    assert settings.log_findings is False


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql+psycopg://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
    ],
)
def test_postgres_urls_use_psycopg_driver(raw: str, expected: str) -> None:
    assert normalize_postgres_url(raw) == expected


def test_engine_settings_read_pool_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@h/db")
    monkeypatch.setenv("DB_POOL_SIZE", "12")
    monkeypatch.setenv("SQL_ECHO", "true")

    settings = resolve_engine_settings()

    assert settings.url == "postgresql+psycopg://u:p@h/db"
    assert settings.pool_size == 12
    assert settings.echo is True
