"""
Configuration Management for the Finance Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This covers where data is stored, the session's exchange-rate table and
the balances used to seed an empty store.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_tracker.models.finance import (
    AccountDraft,
    AccountType,
    Currency,
    DebtDraft,
    DebtType,
    InvestmentDraft,
    Period,
)


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".finance_data"),
        description="Directory holding one JSON file per storage key"
    )

    # Storage keys, one collection per key
    transactions_key: str = "financial-dashboard-transactions"
    investments_key: str = "financial-dashboard-investments"
    accounts_key: str = "financial-dashboard-accounts"
    audit_key: str = "financial-dashboard-audit"

    audit_max_events: int = Field(
        default=500,
        ge=1,
        description="How many audit events to keep in storage"
    )
    export_prefix: str = Field(
        default="finance-backup",
        description="File name prefix for data exports"
    )


class CurrencySettings(BaseSettings):
    """Display currency and the session's exchange-rate table."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_CURRENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: Currency = Currency.USD

    # Mock rates; there is no live rate provider
    exchange_rates: dict[str, dict[str, float]] = Field(
        default_factory=lambda: {
            "USD": {"HKD": 7.8},
            "HKD": {"USD": 0.128},
        },
        description="Nested mapping: from code -> to code -> rate"
    )

    @field_validator('exchange_rates')
    @classmethod
    def validate_rates(cls, v: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        """Rates must be positive; codes are upper-cased."""
        normalised: dict[str, dict[str, float]] = {}
        for from_code, targets in v.items():
            for to_code, rate in targets.items():
                if rate <= 0:
                    raise ValueError(
                        f"Exchange rate {from_code}->{to_code} must be positive, got {rate}"
                    )
                normalised.setdefault(from_code.upper(), {})[to_code.upper()] = rate
        return normalised


class SeedSettings(BaseSettings):
    """
    Records used when storage is empty or unreadable.

    Lists are read from JSON environment values, e.g.
    FINANCE_SEED_ACCOUNTS='[{"name": "BOC", "type": "savings", "balance": 1200}]'
    """

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_SEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    accounts: list[AccountDraft] = Field(
        default_factory=lambda: [
            AccountDraft(name="BOC", type=AccountType.SAVINGS),
            AccountDraft(name="Mox", type=AccountType.SAVINGS),
        ]
    )
    debts: list[DebtDraft] = Field(
        default_factory=lambda: [
            DebtDraft(name="Mox", type=DebtType.CREDIT_CARD),
            DebtDraft(name="MPower", type=DebtType.CREDIT_CARD),
            DebtDraft(name="Travel +", type=DebtType.CREDIT_CARD),
            DebtDraft(name="Uni loan", type=DebtType.STUDENT_LOAN),
        ]
    )
    investments: list[InvestmentDraft] = Field(
        default_factory=lambda: [
            InvestmentDraft(name="Binance", currency=Currency.USD),
            InvestmentDraft(name="Futu", currency=Currency.HKD),
        ]
    )
    include_sample_history: bool = Field(
        default=True,
        description="Add two months of salary/expense history so trends have data"
    )
    sample_history_currency: Currency = Currency.HKD
    sample_salary: Decimal = Field(default=Decimal("25000"), ge=0)
    sample_expenses: list[Decimal] = Field(
        default_factory=lambda: [Decimal("12000"), Decimal("11000")],
        description="Expense totals for one month ago, two months ago, ..."
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Dashboard defaults
    default_period: Period = Period.MONTHLY
    dashboard_trend_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Months shown in the dashboard trend chart"
    )
    analytics_trend_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Default analytics time range in months"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def currency(self) -> CurrencySettings:
        return CurrencySettings()

    @property
    def seed(self) -> SeedSettings:
        return SeedSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with a
    '<name>_error' entry for every section that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "currency", "seed", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
