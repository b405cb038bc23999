"""
Analytics Package

Pure aggregation over transaction snapshots, the reports built from it,
and display formatting helpers.
"""

from finance_tracker.analytics.aggregation import (
    calculate_converted_total,
    calculate_monthly_net_worth,
    calculate_monthly_total,
    calculate_monthly_trend,
    calculate_net_worth,
    calculate_net_worth_trend,
    calculate_percentage_change,
    calculate_total_by_type,
    filter_by_period,
    generate_monthly_trends,
    group_transactions_by_category,
    month_start,
    next_month_start,
)
from finance_tracker.analytics.formatting import (
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

__all__ = [
    # Aggregation
    "calculate_converted_total",
    "calculate_monthly_net_worth",
    "calculate_monthly_total",
    "calculate_monthly_trend",
    "calculate_net_worth",
    "calculate_net_worth_trend",
    "calculate_percentage_change",
    "calculate_total_by_type",
    "filter_by_period",
    "generate_monthly_trends",
    "group_transactions_by_category",
    "month_start",
    "next_month_start",
    # Reports
    "add_percentages",
    "build_analytics_report",
    "build_dashboard_report",
    "build_dashboard_summary",
    "summarize_portfolio",
    # Formatting
    "format_date",
    "format_date_short",
    "format_month_year",
    "format_number",
    "format_percentage",
    "get_category_color",
    "get_category_label",
]
