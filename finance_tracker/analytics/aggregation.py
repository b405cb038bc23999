"""
Aggregation Engine

DESIGN DECISION: Every function here is PURE.
It takes a snapshot of transactions (and parameters) and returns a result.
Nothing is mutated, nothing is read from storage, nothing is raised for
numeric edge cases: zero denominators and empty inputs have explicit
guard branches.

Amounts are summed at face value, whatever their currency. Use
`calculate_converted_total` when a single-currency figure is needed.

Months are calendar months in local time. `now` defaults to the current
time and can be injected for deterministic results.
"""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from finance_tracker.models.finance import (
    CategoryTotal,
    Currency,
    MonthlyTrend,
    Period,
    Transaction,
    TransactionType,
    TrendIndicator,
    to_local_naive,
)

if TYPE_CHECKING:
    from finance_tracker.services.currency import CurrencyService


MONTH_LABEL_FORMAT = "%b %Y"


# =============================================================================
# MONTH HELPERS
# =============================================================================

def month_start(anchor: datetime) -> datetime:
    """First instant of the calendar month containing `anchor`."""
    anchor = to_local_naive(anchor)
    return datetime(anchor.year, anchor.month, 1)


def next_month_start(anchor: datetime) -> datetime:
    """First instant of the month after the one containing `anchor`."""
    return month_start(anchor) + relativedelta(months=1)


def _in_month(moment: datetime, anchor: datetime) -> bool:
    # Half-open interval: the same as "start <= t <= last instant of month"
    return month_start(anchor) <= moment < next_month_start(anchor)


def _amount(transaction: Transaction) -> float:
    return float(transaction.amount)


# =============================================================================
# TOTALS
# =============================================================================

def calculate_total_by_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> float:
    """Sum of amounts over transactions of one type, at face value."""
    return sum(
        (_amount(t) for t in transactions if t.type == transaction_type),
        0.0,
    )


def calculate_monthly_total(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    month_anchor: datetime,
) -> float:
    """Sum of amounts of one type dated within the month containing `month_anchor`."""
    return sum(
        (
            _amount(t)
            for t in transactions
            if t.type == transaction_type and _in_month(t.date, month_anchor)
        ),
        0.0,
    )


def calculate_monthly_net_worth(
    transactions: Iterable[Transaction],
    month_anchor: datetime,
) -> float:
    """
    Net worth movement of one month: assets add, liabilities subtract,
    every other type contributes nothing.
    """
    total = 0.0
    for t in transactions:
        if not _in_month(t.date, month_anchor):
            continue
        if t.type == TransactionType.ASSET:
            total += _amount(t)
        elif t.type == TransactionType.LIABILITY:
            total -= _amount(t)
    return total


def calculate_net_worth(
    total_income: float,
    total_expenses: float,
    total_investments: float,
) -> float:
    """
    Net worth as income minus expenses plus investments.

    NOTE: This is not the asset-minus-liability figure the net worth
    trend and the dashboard use. Both formulas are kept as they are.
    """
    return total_income - total_expenses + total_investments


def calculate_converted_total(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    target_currency: Currency,
    currency_service: "CurrencyService",
) -> float:
    """
    Sum of amounts of one type, each converted into `target_currency` first.

    Opt-in alternative to `calculate_total_by_type`, which sums face values.
    """
    total = 0.0
    for t in transactions:
        if t.type != transaction_type:
            continue
        total += currency_service.convert_currency(
            _amount(t), t.currency, target_currency
        ).converted_amount
    return total


# =============================================================================
# FILTERING
# =============================================================================

def filter_by_period(
    transactions: Iterable[Transaction],
    period: Period,
    reference: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Keep the transactions that fall in a period relative to `reference`.

    - all: everything
    - yearly: same calendar year
    - monthly: same calendar year and month
    - weekly: on or after `reference - 7 days` (a rolling window,
      not a calendar week; later dates are kept too)
    """
    reference = to_local_naive(reference or datetime.now())
    period = Period(period)

    if period == Period.ALL:
        return list(transactions)
    if period == Period.YEARLY:
        return [t for t in transactions if t.date.year == reference.year]
    if period == Period.MONTHLY:
        return [
            t for t in transactions
            if t.date.year == reference.year and t.date.month == reference.month
        ]
    week_ago = reference - timedelta(days=7)
    return [t for t in transactions if t.date >= week_ago]


# =============================================================================
# TRENDS
# =============================================================================

def generate_monthly_trends(
    transactions: Sequence[Transaction],
    month_count: int = 12,
    now: Optional[datetime] = None,
) -> list[MonthlyTrend]:
    """
    Income, expenses and savings for the last `month_count` months.

    Oldest first, ending with the current month, which is partial
    until the month is over.
    """
    now = to_local_naive(now or datetime.now())
    trends = []

    for months_back in range(month_count - 1, -1, -1):
        anchor = now - relativedelta(months=months_back)
        income = calculate_monthly_total(transactions, TransactionType.INCOME, anchor)
        expenses = calculate_monthly_total(transactions, TransactionType.EXPENSE, anchor)
        trends.append(
            MonthlyTrend(
                month=anchor.strftime(MONTH_LABEL_FORMAT),
                income=income,
                expenses=expenses,
                savings=income - expenses,
            )
        )

    return trends


def calculate_percentage_change(
    current: float,
    previous: float,
    use_absolute_base: bool = False,
) -> TrendIndicator:
    """
    Relative change from `previous` to `current`, as magnitude plus direction.

    A previous value of exactly zero reports 0 with the direction taken
    from the sign of `current`. With `use_absolute_base` the change is
    divided by |previous|, which keeps the direction right when the
    previous value is negative.
    """
    if previous == 0:
        return TrendIndicator(value=0.0, is_positive=current >= 0)

    base = abs(previous) if use_absolute_base else previous
    change = (current - previous) / base * 100
    return TrendIndicator(value=abs(change), is_positive=change >= 0)


def calculate_monthly_trend(
    transactions: Sequence[Transaction],
    transaction_type: TransactionType,
    now: Optional[datetime] = None,
) -> TrendIndicator:
    """Change of one type's total from last calendar month to this one."""
    now = to_local_naive(now or datetime.now())
    current = calculate_monthly_total(transactions, transaction_type, now)
    previous = calculate_monthly_total(
        transactions, transaction_type, now - relativedelta(months=1)
    )
    return calculate_percentage_change(current, previous)


def calculate_net_worth_trend(
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> TrendIndicator:
    """
    Change of the monthly asset-minus-liability figure from last month to this one.

    Net worth can be negative, so the change is measured against |previous|:
    going from -1000 to -500 is a 50% improvement.
    """
    now = to_local_naive(now or datetime.now())
    current = calculate_monthly_net_worth(transactions, now)
    previous = calculate_monthly_net_worth(transactions, now - relativedelta(months=1))
    return calculate_percentage_change(current, previous, use_absolute_base=True)


# =============================================================================
# GROUPING
# =============================================================================

def group_transactions_by_category(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[CategoryTotal]:
    """
    Total amount and count per category for one type, largest first.

    Equal amounts keep the order in which their category was first seen.
    Shares of the total are left to the caller.
    """
    groups: dict[str, CategoryTotal] = {}

    for t in transactions:
        if t.type != transaction_type:
            continue
        key = t.category_key
        if key not in groups:
            groups[key] = CategoryTotal(category=key, amount=0.0, count=0)
        groups[key].amount += _amount(t)
        groups[key].count += 1

    # sorted() is stable, so ties stay in first-encounter order
    return sorted(groups.values(), key=lambda group: group.amount, reverse=True)
