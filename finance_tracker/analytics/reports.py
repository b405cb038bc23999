"""
Report Builders

Assemble the figures the dashboard, analytics and portfolio views show
out of the pure aggregation functions.

DESIGN DECISION: Reports are built from a snapshot in one pass and
returned as validated models. Nothing here reads storage; the caller
passes whatever `RecordStore.list()` returned.

Two scopes are used on purpose:
- headline totals follow the selected period
- trends and category breakdowns always look at the full history
"""

from datetime import datetime
from typing import Optional, Sequence

from finance_tracker.analytics.aggregation import (
    calculate_monthly_total,
    calculate_monthly_trend,
    calculate_net_worth,
    calculate_net_worth_trend,
    calculate_total_by_type,
    filter_by_period,
    generate_monthly_trends,
    group_transactions_by_category,
)
from finance_tracker.analytics.formatting import get_category_color, get_category_label
from finance_tracker.models.finance import (
    AnalyticsReport,
    CategoryBreakdown,
    CategoryTotal,
    DashboardReport,
    DashboardSummary,
    HoldingPerformance,
    Investment,
    MonthComparison,
    Period,
    PortfolioSummary,
    Transaction,
    TransactionType,
)


def _share(part: float, whole: float) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def add_percentages(totals: Sequence[CategoryTotal], total: float) -> list[CategoryBreakdown]:
    """
    Attach a share of `total`, a display label and a chart colour to each group.

    Colours are assigned by position, so the largest group always gets
    the first palette entry.
    """
    return [
        CategoryBreakdown(
            category=group.category,
            label=get_category_label(group.category),
            amount=group.amount,
            count=group.count,
            percentage=_share(group.amount, total),
            color=get_category_color(index),
        )
        for index, group in enumerate(totals)
    ]


def _breakdown(
    transactions: Sequence[Transaction],
    transaction_type: TransactionType,
) -> list[CategoryBreakdown]:
    # Shares are measured against the grouped set itself so they add up to 100
    groups = group_transactions_by_category(transactions, transaction_type)
    return add_percentages(groups, sum(group.amount for group in groups))


def build_dashboard_summary(
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> DashboardSummary:
    """All-time totals plus the current month's income, expenses and savings."""
    now = now or datetime.now()

    total_income = calculate_total_by_type(transactions, TransactionType.INCOME)
    total_expenses = calculate_total_by_type(transactions, TransactionType.EXPENSE)
    total_investments = calculate_total_by_type(transactions, TransactionType.INVESTMENT)

    monthly_income = calculate_monthly_total(transactions, TransactionType.INCOME, now)
    monthly_expenses = calculate_monthly_total(transactions, TransactionType.EXPENSE, now)

    return DashboardSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        total_investments=total_investments,
        net_worth=calculate_net_worth(total_income, total_expenses, total_investments),
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        monthly_savings=monthly_income - monthly_expenses,
    )


def build_dashboard_report(
    transactions: Sequence[Transaction],
    period: Period = Period.MONTHLY,
    trend_months: int = 6,
    now: Optional[datetime] = None,
) -> DashboardReport:
    """
    Everything the dashboard shows for one period selection.

    Net worth here is assets minus liabilities within the period.
    Month-over-month trends compare calendar months regardless of
    the period filter.
    """
    now = now or datetime.now()
    period = Period(period)
    in_period = filter_by_period(transactions, period, now)

    total_income = calculate_total_by_type(in_period, TransactionType.INCOME)
    total_expenses = calculate_total_by_type(in_period, TransactionType.EXPENSE)
    total_assets = calculate_total_by_type(in_period, TransactionType.ASSET)
    total_liabilities = calculate_total_by_type(in_period, TransactionType.LIABILITY)
    net_worth = total_assets - total_liabilities

    months = max(trend_months, 1)

    return DashboardReport(
        period=period,
        generated_at=now,
        total_income=total_income,
        total_expenses=total_expenses,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=net_worth,
        savings_rate=_share(net_worth, total_income),
        average_monthly_income=total_income / months,
        average_monthly_expenses=total_expenses / months,
        income_trend=calculate_monthly_trend(transactions, TransactionType.INCOME, now),
        expense_trend=calculate_monthly_trend(transactions, TransactionType.EXPENSE, now),
        asset_trend=calculate_monthly_trend(transactions, TransactionType.ASSET, now),
        net_worth_trend=calculate_net_worth_trend(transactions, now),
        monthly_trends=generate_monthly_trends(transactions, trend_months, now),
        expense_breakdown=_breakdown(transactions, TransactionType.EXPENSE),
        income_breakdown=_breakdown(transactions, TransactionType.INCOME),
    )


def build_analytics_report(
    transactions: Sequence[Transaction],
    time_range_months: int = 6,
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    """
    Trends, breakdowns, month comparison and insights over a time range.

    Averages divide the range's totals by the number of months in it.
    The comparison pits the last month of the range against the one
    before; a range shorter than two months compares against zero.
    """
    now = now or datetime.now()

    trends = generate_monthly_trends(transactions, time_range_months, now)
    expense_breakdown = _breakdown(transactions, TransactionType.EXPENSE)
    income_breakdown = _breakdown(transactions, TransactionType.INCOME)

    current = trends[-1] if trends else None
    previous = trends[-2] if len(trends) >= 2 else None

    comparison = [
        MonthComparison(
            metric=metric,
            current=getattr(current, field) if current else 0.0,
            previous=getattr(previous, field) if previous else 0.0,
        )
        for metric, field in (
            ("Income", "income"),
            ("Expenses", "expenses"),
            ("Savings", "savings"),
        )
    ]

    months = max(time_range_months, 1)
    average_income = sum(trend.income for trend in trends) / months
    average_expenses = sum(trend.expenses for trend in trends) / months
    average_savings = average_income - average_expenses

    expense_count = sum(group.count for group in expense_breakdown)
    expense_total = sum(group.amount for group in expense_breakdown)

    return AnalyticsReport(
        time_range_months=time_range_months,
        generated_at=now,
        monthly_trends=trends,
        expense_breakdown=expense_breakdown,
        income_breakdown=income_breakdown,
        comparison=comparison,
        average_monthly_income=average_income,
        average_monthly_expenses=average_expenses,
        average_monthly_savings=average_savings,
        savings_rate=_share(average_savings, average_income) if average_income > 0 else 0.0,
        top_expense_category=expense_breakdown[0].category if expense_breakdown else None,
        primary_income_source=income_breakdown[0].category if income_breakdown else None,
        income_source_count=len(income_breakdown),
        average_expense_transaction=expense_total / expense_count if expense_count else 0.0,
        transaction_count=len(transactions),
    )


def summarize_portfolio(investments: Sequence[Investment]) -> PortfolioSummary:
    """Per-holding performance and portfolio totals, at face value."""
    holdings = [
        HoldingPerformance(
            id=investment.id,
            name=investment.name,
            currency=investment.currency,
            cost_basis=investment.cost_basis,
            current_value=investment.current_value,
            gain_loss=investment.gain_loss,
            gain_loss_percentage=investment.gain_loss_percentage,
        )
        for investment in investments
    ]

    total_cost = sum(holding.cost_basis for holding in holdings)
    total_value = sum(holding.current_value for holding in holdings)
    total_gain = total_value - total_cost

    return PortfolioSummary(
        holdings=holdings,
        total_cost_basis=total_cost,
        total_current_value=total_value,
        total_gain_loss=total_gain,
        total_gain_loss_percentage=_share(total_gain, total_cost),
    )
