"""
Data Models Package

This package contains all Pydantic models used by the finance tracker:
stored records, setup drafts, currency results and analytics results.
"""

from finance_tracker.models.finance import (
    Account,
    AccountDraft,
    AccountType,
    AnalyticsReport,
    Category,
    CategoryBreakdown,
    CategoryTotal,
    Currency,
    CurrencyConversion,
    CurrencyRate,
    DashboardReport,
    DashboardSummary,
    DebtDraft,
    DebtType,
    ExpenseCategory,
    ExportSnapshot,
    HoldingPerformance,
    IncomeCategory,
    Investment,
    InvestmentDraft,
    InvestmentType,
    MonthComparison,
    MonthlyTrend,
    Period,
    PortfolioSummary,
    SyntheticCategory,
    Transaction,
    TransactionType,
    TrendIndicator,
    category_key,
    generate_id,
    resolve_category,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Account",
    "Investment",
    "Transaction",
    # Enumerations
    "AccountType",
    "Category",
    "Currency",
    "DebtType",
    "ExpenseCategory",
    "IncomeCategory",
    "InvestmentType",
    "Period",
    "SyntheticCategory",
    "TransactionType",
    # Setup drafts
    "AccountDraft",
    "DebtDraft",
    "InvestmentDraft",
    # Currency models
    "CurrencyConversion",
    "CurrencyRate",
    # Analytics models
    "AnalyticsReport",
    "CategoryBreakdown",
    "CategoryTotal",
    "DashboardReport",
    "DashboardSummary",
    "HoldingPerformance",
    "MonthComparison",
    "MonthlyTrend",
    "PortfolioSummary",
    "TrendIndicator",
    # Export
    "ExportSnapshot",
    # Helpers
    "category_key",
    "generate_id",
    "resolve_category",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
