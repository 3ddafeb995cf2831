"""Formatting utilities for currency and status display."""

from __future__ import annotations

import math
from datetime import date
from typing import Union

from . import config


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with two decimals and thousands separators.

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{amount:,.2f}"
    return f"{config.CURRENCY_SYMBOL}{formatted}" if include_sign else formatted


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not treat them as LaTeX."""
    return text.replace("$", "\\$")


def format_percentage(value: float) -> str:
    if math.isinf(value):
        return "∞%"
    return f"{value:.1f}%"


def format_month(key: str) -> str:
    """Turn a ``YYYY-MM`` month key into a short label such as ``Jan 2025``."""
    year, month = key.split('-')
    return date(int(year), int(month), 1).strftime('%b %Y')


def budget_message(over_budget: bool, difference: float) -> str:
    if over_budget:
        return f"Over budget by {format_currency(difference)}"
    return f"{format_currency(difference)} remaining"


def goal_label(is_completed: bool, is_overdue: bool, days_remaining: int) -> str:
    if is_completed:
        return "Completed!"
    if is_overdue:
        return f"{abs(days_remaining)} days overdue"
    return f"{days_remaining} days left"
