"""
Display helpers for dates, numbers and categories.
"""

from datetime import date, datetime
from typing import Union

from dateutil.parser import isoparse

from finance_tracker.models.finance import Category, category_key, to_local_naive


CATEGORY_COLORS = [
    "#1976d2",
    "#dc004e",
    "#2e7d32",
    "#ed6c02",
    "#0288d1",
    "#9c27b0",
    "#d32f2f",
    "#388e3c",
    "#f57c00",
    "#5e35b1",
    "#c2185b",
    "#00796b",
    "#fbc02d",
    "#303f9f",
    "#689f38",
]

CATEGORY_LABELS = {
    "food": "Food & Dining",
    "transportation": "Transportation",
    "entertainment": "Entertainment",
    "healthcare": "Healthcare",
    "education": "Education",
    "shopping": "Shopping",
    "utilities": "Utilities",
    "other": "Other",
    "salary": "Salary",
    "freelance": "Freelance",
    "investment_return": "Investment Return",
    "business": "Business",
}

DateLike = Union[date, datetime, str]


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, str):
        value = isoparse(value)
    return to_local_naive(value)


def format_date(value: DateLike) -> str:
    """e.g. 'Mar 05, 2024'"""
    return _as_datetime(value).strftime("%b %d, %Y")


def format_date_short(value: DateLike) -> str:
    return _as_datetime(value).strftime("%b %d")


def format_month_year(value: DateLike) -> str:
    return _as_datetime(value).strftime("%b %Y")


def format_number(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}"


def format_percentage(value: float, decimals: int = 1) -> str:
    return f"{format_number(value, decimals)}%"


def get_category_label(category: Category) -> str:
    """Human readable label. Unknown categories are shown as they are."""
    key = category_key(category)
    return CATEGORY_LABELS.get(key, key)


def get_category_color(index: int) -> str:
    """Chart colour for the n-th category, cycling through the palette."""
    return CATEGORY_COLORS[index % len(CATEGORY_COLORS)]
