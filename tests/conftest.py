"""
Shared fixtures.

Every test pins "now" so month bucketing is deterministic, and uses
in-memory storage so nothing touches the filesystem outside tmp_path.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from dateutil.relativedelta import relativedelta

from finance_tracker.audit import AuditLogger
from finance_tracker.config import get_settings
from finance_tracker.models.finance import Currency, Transaction, TransactionType
from finance_tracker.services.storage import InMemoryStorage, KeyValueAuditStorage


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def last_month(now) -> datetime:
    return now - relativedelta(months=1)


@pytest.fixture
def make_transaction():
    """Factory for transactions with sensible defaults."""

    def _make(
        transaction_type=TransactionType.EXPENSE,
        amount="100",
        date=None,
        category=None,
        currency=Currency.USD,
        **extra,
    ) -> Transaction:
        data = {
            "type": transaction_type,
            "amount": Decimal(str(amount)),
            "currency": currency,
            "date": date or datetime(2024, 3, 10),
            **extra,
        }
        if category is not None:
            data["category"] = category
        return Transaction(**data)

    return _make


@pytest.fixture
def scenario(make_transaction, now, last_month) -> list[Transaction]:
    """Two months of salary and spending."""
    return [
        make_transaction(TransactionType.INCOME, 25000, now, "salary"),
        make_transaction(TransactionType.EXPENSE, 12000, now, "food"),
        make_transaction(TransactionType.INCOME, 25000, last_month, "salary"),
        make_transaction(TransactionType.EXPENSE, 11000, last_month, "food"),
    ]


@pytest.fixture
def backend() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def audit_logger(backend) -> AuditLogger:
    return AuditLogger(KeyValueAuditStorage(backend, key="audit", max_events=50))


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
