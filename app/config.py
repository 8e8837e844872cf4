"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.domain.budget import Strictness
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_strictness_env(name: str, default: Strictness) -> Strictness:
    raw_value = _get_str_env(name, default.value).lower()
    try:
        return Strictness(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class BudgetCSVSettings:
    """
    Runtime settings for budget CSV validation, correction and export.
    """

    strictness: Strictness = Strictness.LENIENT
    minor_unit_threshold: int = 10_000
    batch_scale_ratio: float = 0.8
    max_edit_distance: int = 3
    max_warranty_months: int = 24
    max_validity_days: int = 90
    min_plausible_price: int = 10
    max_plausible_price: int = 100_000
    export_force_integer: bool = False
    max_reported_findings: int = 500
    log_findings: bool = False
    batch_size: int = 1000


@lru_cache(maxsize=1)
def get_budget_csv_settings() -> BudgetCSVSettings:
    """
    Return cached budget CSV settings from environment variables.
    """

    return BudgetCSVSettings(
        strictness=_get_strictness_env("BUDGET_CSV_STRICTNESS", Strictness.LENIENT),
        minor_unit_threshold=max(1, _get_int_env("BUDGET_CSV_MINOR_UNIT_THRESHOLD", 10_000)),
        batch_scale_ratio=min(1.0, max(0.0, _get_float_env("BUDGET_CSV_BATCH_SCALE_RATIO", 0.8))),
        max_edit_distance=max(0, _get_int_env("BUDGET_CSV_MAX_EDIT_DISTANCE", 3)),
        max_warranty_months=max(0, _get_int_env("BUDGET_CSV_MAX_WARRANTY_MONTHS", 24)),
        max_validity_days=max(0, _get_int_env("BUDGET_CSV_MAX_VALIDITY_DAYS", 90)),
        min_plausible_price=max(0, _get_int_env("BUDGET_CSV_MIN_PLAUSIBLE_PRICE", 10)),
        max_plausible_price=max(1, _get_int_env("BUDGET_CSV_MAX_PLAUSIBLE_PRICE", 100_000)),
        export_force_integer=_get_bool_env("BUDGET_CSV_EXPORT_FORCE_INTEGER", False),
        max_reported_findings=max(1, _get_int_env("BUDGET_CSV_MAX_REPORTED_FINDINGS", 500)),
        log_findings=_get_bool_env("BUDGET_CSV_LOG_FINDINGS", False),
        batch_size=max(1, _get_int_env("BUDGET_CSV_BATCH_SIZE", 1000)),
    )
