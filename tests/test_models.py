"""
Tests for the Finance Tracker models

Test strategy:
1. Unit tests for individual components (models, services, engine)
2. Integration tests for flows (with in-memory storage)
3. No filesystem access outside tmp_path
"""

import json
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from finance_tracker.models.finance import (
    Account,
    AccountType,
    Currency,
    ExpenseCategory,
    ExportSnapshot,
    IncomeCategory,
    Investment,
    InvestmentType,
    SyntheticCategory,
    Transaction,
    TransactionType,
    category_key,
    resolve_category,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction record."""

    def test_transaction_creation(self):
        """Test Transaction model creation with defaults."""
        tx = Transaction(type=TransactionType.EXPENSE, amount=Decimal("42.50"))
        assert tx.amount == Decimal("42.50")
        assert tx.currency == Currency.USD
        assert tx.category == ExpenseCategory.OTHER
        assert tx.tags == []
        assert tx.id

    def test_ids_are_unique(self):
        """Test that generated ids are never reused."""
        first = Transaction(type=TransactionType.INCOME, amount=1)
        second = Transaction(type=TransactionType.INCOME, amount=1)
        assert first.id != second.id

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected; the sign comes from the type."""
        with pytest.raises(ValidationError):
            Transaction(type=TransactionType.EXPENSE, amount=Decimal("-100"))

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Transaction(type="gift", amount=10)

    def test_rejects_unknown_currency(self):
        with pytest.raises(ValidationError):
            Transaction(type=TransactionType.EXPENSE, amount=10, currency="EUR")

    def test_is_immutable(self):
        tx = Transaction(type=TransactionType.EXPENSE, amount=10)
        with pytest.raises(ValidationError):
            tx.amount = Decimal("20")

    def test_strips_whitespace(self):
        tx = Transaction(type=TransactionType.EXPENSE, amount=10, description="  Lunch  ")
        assert tx.description == "Lunch"

    def test_accepts_camel_case_payload(self):
        """Test that documents written by the browser version load unchanged."""
        tx = Transaction.model_validate(
            {
                "id": "abc",
                "type": "income",
                "amount": 25000,
                "currency": "HKD",
                "description": "Salary",
                "category": "salary",
                "date": "2024-03-01T00:00:00",
                "tags": ["work"],
            }
        )
        assert tx.id == "abc"
        assert tx.category == IncomeCategory.SALARY
        assert tx.currency == Currency.HKD

    def test_aware_date_is_converted_to_local_naive(self):
        aware = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        tx = Transaction(type=TransactionType.EXPENSE, amount=1, date=aware)
        assert tx.date.tzinfo is None
        assert tx.date == aware.astimezone().replace(tzinfo=None)

    def test_plain_date_becomes_midnight(self):
        tx = Transaction(type=TransactionType.EXPENSE, amount=1, date=date(2024, 3, 1))
        assert tx.date == datetime(2024, 3, 1)


class TestCategoryResolution:
    """Tests for resolving categories against the transaction type."""

    def test_other_resolves_per_type(self):
        """'other' exists in three enumerations; the type decides."""
        assert resolve_category(TransactionType.EXPENSE, "other") is ExpenseCategory.OTHER
        assert resolve_category(TransactionType.INCOME, "other") is IncomeCategory.OTHER
        assert resolve_category(TransactionType.ASSET, "other") is InvestmentType.OTHER

    def test_synthetic_categories(self):
        assert resolve_category(TransactionType.ASSET, "Initial Balance") is SyntheticCategory.INITIAL_BALANCE
        assert resolve_category(TransactionType.LIABILITY, "Debt") is SyntheticCategory.DEBT

    def test_unknown_category_kept_as_label(self):
        tx = Transaction(type=TransactionType.EXPENSE, amount=1, category="Pets")
        assert tx.category == "Pets"
        assert tx.category_key == "Pets"

    def test_category_key(self):
        assert category_key(ExpenseCategory.FOOD) == "food"
        assert category_key(SyntheticCategory.DEBT) == "Debt"
        assert category_key("custom") == "custom"

    def test_missing_category_defaults_per_type(self):
        """Without a category each type gets its own 'other'."""
        assert Transaction(type=TransactionType.INCOME, amount=1).category is IncomeCategory.OTHER
        assert Transaction(type=TransactionType.ASSET, amount=1).category is InvestmentType.OTHER
        assert Transaction(type=TransactionType.EXPENSE, amount=1).category is ExpenseCategory.OTHER

    def test_round_trip_keeps_variant(self):
        tx = Transaction(type=TransactionType.INCOME, amount=1, category=IncomeCategory.OTHER)
        restored = Transaction.model_validate_json(tx.model_dump_json(by_alias=True))
        assert restored.category is IncomeCategory.OTHER


class TestInvestmentModel:
    """Tests for Investment derived figures."""

    def _investment(self, purchase, current, quantity="10"):
        return Investment(
            name="Tracker Fund",
            type=InvestmentType.MUTUAL_FUNDS,
            quantity=Decimal(quantity),
            purchase_price=Decimal(purchase),
            current_price=Decimal(current),
        )

    def test_gain(self):
        inv = self._investment("100", "120")
        assert inv.cost_basis == pytest.approx(1000)
        assert inv.current_value == pytest.approx(1200)
        assert inv.gain_loss == pytest.approx(200)
        assert inv.gain_loss_percentage == pytest.approx(20)

    def test_loss(self):
        inv = self._investment("100", "75")
        assert inv.gain_loss == pytest.approx(-250)
        assert inv.gain_loss_percentage == pytest.approx(-25)

    def test_zero_purchase_price_reports_zero_percent(self):
        inv = self._investment("0", "50")
        assert inv.gain_loss_percentage == 0.0

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            Investment(name="", quantity=1, purchase_price=1, current_price=1)


class TestAccountAndSnapshot:
    """Tests for accounts and the export document."""

    def test_account_defaults(self):
        account = Account(name="BOC", type=AccountType.SAVINGS)
        assert account.balance == Decimal("0")
        assert account.currency == Currency.USD

    def test_export_snapshot_uses_camel_case(self):
        snapshot = ExportSnapshot(
            investments=[
                Investment(name="Futu", quantity=1, purchase_price=5, current_price=6)
            ],
            export_date=datetime(2024, 3, 15),
        )
        dumped = snapshot.model_dump(by_alias=True)
        assert "exportDate" in dumped
        assert "purchasePrice" in dumped["investments"][0]

    def test_money_serialises_as_json_numbers(self):
        """Whole amounts stay integers, fractional ones become floats."""
        tx = json.loads(Transaction(type=TransactionType.INCOME, amount=25000).model_dump_json(by_alias=True))
        assert tx["amount"] == 25000
        assert isinstance(tx["amount"], int)

        inv = json.loads(
            Investment(name="Futu", quantity=2, purchase_price="10.5", current_price=11).model_dump_json(by_alias=True)
        )
        assert (inv["quantity"], inv["purchasePrice"], inv["currentPrice"]) == (2, 10.5, 11)

        account = json.loads(Account(name="BOC", balance=Decimal("99.99")).model_dump_json())
        assert account["balance"] == 99.99

    def test_python_dump_keeps_decimal(self):
        tx = Transaction(type=TransactionType.INCOME, amount="12.30")
        assert tx.model_dump()["amount"] == Decimal("12.30")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            description="Created transaction",
        )
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.STORAGE_FALLBACK,
            description="Using defaults",
            details={"collection": "transactions"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "storage_fallback"
        assert log_dict["details"]["collection"] == "transactions"

    def test_builder_record_created(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.record_created("transaction", "tx-1", correlation_id)
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.entity_id == "tx-1"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_builder_storage_fallback_is_warning(self):
        event = AuditEventBuilder.storage_fallback("accounts", "no stored data")
        assert event.severity == AuditSeverity.WARNING
        assert event.details["reason"] == "no stored data"

    def test_builder_storage_write_failed_is_error(self):
        event = AuditEventBuilder.storage_write_failed("accounts", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_builder_system_error(self):
        event = AuditEventBuilder.system_error("import_rejected", "bad document", {"error_count": 2})
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"error_count": 2}

    def test_builder_setup_completed(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.setup_completed(2, 1, 4, correlation_id)
        assert event.details == {"accounts": 2, "investments": 1, "transactions": 4}
        assert event.correlation_id == correlation_id
