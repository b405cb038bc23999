"""
Currency Conversion Service

Resolves exchange rates between currency codes and formats amounts
for display.

DESIGN DECISION: This service never raises. A missing rate degrades to
the identity rate (and is logged) because display code must never crash
on missing rate data.

DESIGN DECISION: One instance is built at start-up from configuration
and passed to whoever needs it. There is no module-level singleton.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

import structlog

from finance_tracker.models.finance import Currency, CurrencyConversion, CurrencyRate


# Mock exchange rates; there is no live rate provider
DEFAULT_EXCHANGE_RATES: dict[str, dict[str, float]] = {
    "USD": {"HKD": 7.8},
    "HKD": {"USD": 0.128},
}

PIVOT_CURRENCY = "USD"

CURRENCY_SYMBOLS: dict[str, str] = {
    Currency.USD.value: "$",
    Currency.HKD.value: "HK$",
}

CurrencyCode = Union[Currency, str]


def _code(currency: CurrencyCode) -> str:
    if isinstance(currency, Enum):
        return currency.value
    return str(currency).upper()


class CurrencyService:
    """
    Holds the session's rate table.

    Lookup order for a pair:
    1. same currency -> 1 (table not consulted)
    2. direct entry
    3. inverse of the reverse entry
    4. pivot through USD when both USD->from and USD->to exist
    5. identity rate, logged as a miss
    """

    def __init__(
        self,
        rates: Optional[dict[str, dict[str, float]]] = None,
    ):
        self._rates: dict[tuple[str, str], CurrencyRate] = {}
        self._logger = structlog.get_logger(__name__)

        table = DEFAULT_EXCHANGE_RATES if rates is None else rates
        for from_code, targets in table.items():
            for to_code, rate in targets.items():
                self.set_rate(from_code, to_code, rate)

    @property
    def rates(self) -> list[CurrencyRate]:
        """Snapshot of the rate table."""
        return list(self._rates.values())

    def set_rate(self, from_currency: CurrencyCode, to_currency: CurrencyCode, rate: float) -> CurrencyRate:
        """Insert or replace a direct rate."""
        entry = CurrencyRate(
            from_currency=_code(from_currency),
            to_currency=_code(to_currency),
            rate=rate,
            timestamp=datetime.now(),
        )
        self._rates[(entry.from_currency, entry.to_currency)] = entry
        return entry

    def get_exchange_rate(self, from_currency: CurrencyCode, to_currency: CurrencyCode) -> float:
        """Resolve the multiplicative rate from one currency to another."""
        source = _code(from_currency)
        target = _code(to_currency)

        if source == target:
            return 1.0

        direct = self._rates.get((source, target))
        if direct is not None:
            return direct.rate

        reverse = self._rates.get((target, source))
        if reverse is not None:
            return 1 / reverse.rate

        pivot_from = self._rates.get((PIVOT_CURRENCY, source))
        pivot_to = self._rates.get((PIVOT_CURRENCY, target))
        if pivot_from is not None and pivot_to is not None:
            return pivot_to.rate / pivot_from.rate

        self._logger.warning(
            "exchange_rate_not_found",
            from_currency=source,
            to_currency=target,
        )
        return 1.0

    def convert_currency(
        self,
        amount: float,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
    ) -> CurrencyConversion:
        """Convert an amount. Always succeeds; unresolved pairs use rate 1."""
        rate = self.get_exchange_rate(from_currency, to_currency)
        return CurrencyConversion(
            amount=float(amount),
            converted_amount=float(amount) * rate,
            rate=rate,
            from_currency=_code(from_currency),
            to_currency=_code(to_currency),
            timestamp=datetime.now(),
        )

    def format_currency(self, amount: float, currency: CurrencyCode) -> str:
        """
        Format an amount for display.

        Known currencies get their symbol and thousands separators
        ('$1,234.56', 'HK$1,234.56', '-$5.00'). Unknown codes fall back
        to '<CODE> <amount>' with two decimals.
        """
        code = _code(currency)
        symbol = CURRENCY_SYMBOLS.get(code)
        if symbol is None:
            return f"{code} {float(amount):.2f}"

        value = float(amount)
        sign = "-" if value < 0 else ""
        return f"{sign}{symbol}{abs(value):,.2f}"

    def get_supported_currencies(self) -> list[Currency]:
        return list(Currency)

    def get_currency_symbol(self, currency: CurrencyCode) -> str:
        code = _code(currency)
        return CURRENCY_SYMBOLS.get(code, code)
