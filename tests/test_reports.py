"""
Tests for report builders and display formatting.
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from finance_tracker.analytics.formatting import (
    CATEGORY_COLORS,
    format_date,
    format_date_short,
    format_month_year,
    format_number,
    format_percentage,
    get_category_color,
    get_category_label,
)
from finance_tracker.analytics.reports import (
    add_percentages,
    build_analytics_report,
    build_dashboard_report,
    build_dashboard_summary,
    summarize_portfolio,
)
from finance_tracker.models.finance import (
    CategoryTotal,
    ExpenseCategory,
    IncomeCategory,
    Investment,
    Period,
    SyntheticCategory,
    TransactionType,
)


class TestFormatting:
    """Tests for display helpers."""

    def test_dates(self):
        moment = datetime(2024, 3, 5, 18, 30)
        assert format_date(moment) == "Mar 05, 2024"
        assert format_date_short(moment) == "Mar 05"
        assert format_month_year(moment) == "Mar 2024"

    def test_date_from_string_and_date(self):
        assert format_date("2024-12-25T08:00:00") == "Dec 25, 2024"
        assert format_month_year(date(2023, 1, 9)) == "Jan 2023"

    def test_zulu_string_shown_in_local_time(self):
        expected = datetime(2024, 12, 25, 8, tzinfo=timezone.utc).astimezone()
        assert format_date("2024-12-25T08:00:00Z") == expected.strftime("%b %d, %Y")
        assert format_date_short("2024-12-25T08:00:00.123Z") == expected.strftime("%b %d")

    def test_date_only_string(self):
        assert format_date("2024-03-05") == "Mar 05, 2024"

    def test_numbers(self):
        assert format_number(3.14159) == "3.14"
        assert format_number(2, decimals=0) == "2"
        assert format_percentage(9.0909) == "9.1%"
        assert format_percentage(50, decimals=2) == "50.00%"

    def test_category_labels(self):
        assert get_category_label(ExpenseCategory.FOOD) == "Food & Dining"
        assert get_category_label("investment_return") == "Investment Return"
        assert get_category_label(IncomeCategory.OTHER) == "Other"
        assert get_category_label(SyntheticCategory.INITIAL_BALANCE) == "Initial Balance"
        assert get_category_label("Pets") == "Pets"

    def test_category_colors_cycle(self):
        assert len(CATEGORY_COLORS) == 15
        assert get_category_color(0) == "#1976d2"
        assert get_category_color(15) == get_category_color(0)


class TestAddPercentages:
    """Tests for category shares."""

    def test_shares_and_colors(self):
        totals = [
            CategoryTotal(category="food", amount=75, count=3),
            CategoryTotal(category="shopping", amount=25, count=1),
        ]
        breakdown = add_percentages(totals, 100)
        assert [b.percentage for b in breakdown] == [75, 25]
        assert [b.label for b in breakdown] == ["Food & Dining", "Shopping"]
        assert [b.color for b in breakdown] == CATEGORY_COLORS[:2]

    def test_zero_total(self):
        totals = [CategoryTotal(category="food", amount=0, count=1)]
        assert add_percentages(totals, 0)[0].percentage == 0


class TestDashboardSummary:
    """Tests for the headline summary."""

    def test_summary(self, scenario, make_transaction, now):
        transactions = scenario + [make_transaction(TransactionType.INVESTMENT, 1000, now)]
        summary = build_dashboard_summary(transactions, now)
        assert summary.total_income == pytest.approx(50000)
        assert summary.total_expenses == pytest.approx(23000)
        assert summary.total_investments == pytest.approx(1000)
        assert summary.net_worth == pytest.approx(28000)
        assert summary.monthly_income == pytest.approx(25000)
        assert summary.monthly_expenses == pytest.approx(12000)
        assert summary.monthly_savings == pytest.approx(13000)

    def test_empty(self, now):
        summary = build_dashboard_summary([], now)
        assert summary.net_worth == 0


class TestDashboardReport:
    """Tests for the full dashboard report."""

    @pytest.fixture
    def transactions(self, scenario, make_transaction, now, last_month):
        return scenario + [
            make_transaction(TransactionType.ASSET, 5000, now, "Initial Balance"),
            make_transaction(TransactionType.LIABILITY, 2000, now, "Debt"),
            make_transaction(TransactionType.ASSET, 1000, last_month, "Initial Balance"),
        ]

    def test_monthly_period_totals(self, transactions, now):
        report = build_dashboard_report(transactions, Period.MONTHLY, 6, now)
        assert report.period == Period.MONTHLY
        assert report.total_income == pytest.approx(25000)
        assert report.total_expenses == pytest.approx(12000)
        assert report.total_assets == pytest.approx(5000)
        assert report.total_liabilities == pytest.approx(2000)
        assert report.net_worth == pytest.approx(3000)
        assert report.savings_rate == pytest.approx(12)
        assert report.average_monthly_income == pytest.approx(25000 / 6)

    def test_trends_ignore_period(self, transactions, now):
        report = build_dashboard_report(transactions, Period.MONTHLY, 6, now)
        assert len(report.monthly_trends) == 6
        assert report.expense_trend.value == pytest.approx(100 / 11, rel=1e-6)
        assert report.income_trend.value == 0
        assert report.asset_trend.value == pytest.approx(400)
        # 1000 last month, 3000 this month
        assert report.net_worth_trend.value == pytest.approx(200)
        assert report.net_worth_trend.is_positive is True

    def test_breakdowns_cover_full_history(self, transactions, now):
        report = build_dashboard_report(transactions, Period.MONTHLY, 6, now)
        assert len(report.expense_breakdown) == 1
        assert report.expense_breakdown[0].amount == pytest.approx(23000)
        assert report.expense_breakdown[0].percentage == pytest.approx(100)

    def test_savings_rate_without_income(self, make_transaction, now):
        transactions = [make_transaction(TransactionType.ASSET, 100, now)]
        report = build_dashboard_report(transactions, Period.ALL, 6, now)
        assert report.savings_rate == 0


class TestAnalyticsReport:
    """Tests for the analytics report."""

    def test_comparison_and_averages(self, scenario, now):
        report = build_analytics_report(scenario, 3, now)
        assert len(report.monthly_trends) == 3
        comparison = {c.metric: (c.current, c.previous) for c in report.comparison}
        assert comparison == {
            "Income": (25000, 25000),
            "Expenses": (12000, 11000),
            "Savings": (13000, 14000),
        }
        assert report.average_monthly_income == pytest.approx(50000 / 3)
        assert report.average_monthly_expenses == pytest.approx(23000 / 3)
        assert report.average_monthly_savings == pytest.approx(27000 / 3)
        assert report.savings_rate == pytest.approx(54)

    def test_insights(self, scenario, make_transaction, now):
        transactions = scenario + [
            make_transaction(TransactionType.EXPENSE, 1000, now, "transportation"),
            make_transaction(TransactionType.INCOME, 500, now, "freelance"),
        ]
        report = build_analytics_report(transactions, 6, now)
        assert report.top_expense_category == "food"
        assert report.primary_income_source == "salary"
        assert report.income_source_count == 2
        assert report.average_expense_transaction == pytest.approx(8000)
        assert report.transaction_count == 6

    def test_single_month_compares_against_zero(self, scenario, now):
        report = build_analytics_report(scenario, 1, now)
        assert all(c.previous == 0 for c in report.comparison)

    def test_empty(self, now):
        report = build_analytics_report([], 6, now)
        assert report.savings_rate == 0
        assert report.top_expense_category is None
        assert report.primary_income_source is None
        assert report.average_expense_transaction == 0
        assert report.transaction_count == 0


class TestPortfolioSummary:
    """Tests for investment performance."""

    def test_totals(self):
        investments = [
            Investment(name="A", quantity=Decimal("2"), purchase_price=Decimal("100"), current_price=Decimal("150")),
            Investment(name="B", quantity=Decimal("1"), purchase_price=Decimal("200"), current_price=Decimal("150")),
        ]
        summary = summarize_portfolio(investments)
        assert summary.total_cost_basis == pytest.approx(400)
        assert summary.total_current_value == pytest.approx(450)
        assert summary.total_gain_loss == pytest.approx(50)
        assert summary.total_gain_loss_percentage == pytest.approx(12.5)
        assert [h.gain_loss_percentage for h in summary.holdings] == pytest.approx([50, -25])

    def test_empty_portfolio(self):
        summary = summarize_portfolio([])
        assert summary.holdings == []
        assert summary.total_gain_loss_percentage == 0
