"""
Tests for configuration loading.
"""

import pytest
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError

from finance_tracker.config import (
    AppSettings,
    CurrencySettings,
    SeedSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from finance_tracker.models.finance import AccountType, Currency, Period


class TestStorageSettings:
    def test_defaults(self):
        settings = StorageSettings()
        assert settings.data_dir == Path(".finance_data")
        assert settings.transactions_key == "financial-dashboard-transactions"
        assert settings.investments_key == "financial-dashboard-investments"
        assert settings.accounts_key == "financial-dashboard-accounts"
        assert settings.export_prefix == "finance-backup"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FINANCE_STORAGE_DATA_DIR", str(tmp_path))
        assert StorageSettings().data_dir == tmp_path


class TestCurrencySettings:
    def test_default_rates(self):
        settings = CurrencySettings()
        assert settings.default_currency == Currency.USD
        assert settings.exchange_rates == {"USD": {"HKD": 7.8}, "HKD": {"USD": 0.128}}

    def test_codes_upper_cased(self):
        settings = CurrencySettings(exchange_rates={"usd": {"hkd": 7.8}})
        assert settings.exchange_rates == {"USD": {"HKD": 7.8}}

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValidationError):
            CurrencySettings(exchange_rates={"USD": {"HKD": 0}})


class TestSeedSettings:
    def test_accounts_from_env(self, monkeypatch):
        monkeypatch.setenv(
            "FINANCE_SEED_ACCOUNTS",
            '[{"name": "HSBC", "type": "checking", "balance": 500, "currency": "HKD"}]',
        )
        settings = SeedSettings()
        assert len(settings.accounts) == 1
        assert settings.accounts[0].type == AccountType.CHECKING
        assert settings.accounts[0].balance == Decimal("500")

    def test_sample_history_switch(self, monkeypatch):
        monkeypatch.setenv("FINANCE_SEED_INCLUDE_SAMPLE_HISTORY", "false")
        assert SeedSettings().include_sample_history is False


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.default_period == Period.MONTHLY
        assert settings.dashboard_trend_months == 6
        assert settings.analytics_trend_months == 6

    def test_log_level_normalised(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings(log_level="chatty")


class TestSettingsContainer:
    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_validate_all_settings(self):
        results = validate_all_settings()
        assert results == {"storage": True, "currency": True, "seed": True, "app": True}

    def test_validate_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
