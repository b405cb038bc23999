"""Currency conversion and formatting."""

from finance_tracker.services.currency.currency_service import (
    CURRENCY_SYMBOLS,
    DEFAULT_EXCHANGE_RATES,
    CurrencyService,
)

__all__ = [
    "CURRENCY_SYMBOLS",
    "DEFAULT_EXCHANGE_RATES",
    "CurrencyService",
]
