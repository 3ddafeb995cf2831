"""Configuration management for the expense tracker.

This module centralizes the tunable thresholds used by the analytics
code together with environment variable overrides.  Values are read
once at import time; the ``get_*`` helpers read the module attributes
so tests can monkeypatch them.
"""

from __future__ import annotations

import logging
import os

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Budget utilisation above this percentage is reported as "near limit"
NEAR_LIMIT_PERCENT = _env_float("EXPENSE_TRACKER_NEAR_LIMIT_PERCENT", 80.0)

# Insights sizes
TOP_N = _env_int("EXPENSE_TRACKER_TOP_N", 5)
TREND_MONTHS = _env_int("EXPENSE_TRACKER_TREND_MONTHS", 6)

# Recurring templates stay valid in every month
MAX_DAY_OF_MONTH = 28

CURRENCY_SYMBOL = os.getenv("EXPENSE_TRACKER_CURRENCY_SYMBOL", "$")

SEED_ON_START = os.getenv("EXPENSE_TRACKER_SEED_ON_START", "true").strip().lower() in _TRUE_VALUES

LOG_LEVEL = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_near_limit_percent() -> float:
    """Return the near-limit threshold used by the budget evaluator."""
    return NEAR_LIMIT_PERCENT


def get_top_n() -> int:
    return max(TOP_N, 1)


def get_trend_months() -> int:
    return max(TREND_MONTHS, 1)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Safe to call on every Streamlit rerun; handlers are only added once.
    """
    logger = logging.getLogger("expense_tracker")
    resolved = getattr(logging, (level or LOG_LEVEL).upper(), logging.WARNING)
    logger.setLevel(resolved)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
