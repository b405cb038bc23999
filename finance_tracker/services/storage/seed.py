"""
Seed Data and Setup Record Synthesis

The initial setup flow and the empty-storage fallback both turn account,
debt and investment drafts into stored records. Both go through
`build_setup_records` so the two paths can never disagree.

Mirror transactions (the ASSET/LIABILITY entries that make balances show
up on the dashboard) are independent records. Nothing links them back to
the account or investment they were generated from.
"""

from datetime import datetime
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, Field

from finance_tracker.config.settings import SeedSettings
from finance_tracker.models.finance import (
    Account,
    AccountDraft,
    DebtDraft,
    ExpenseCategory,
    IncomeCategory,
    Investment,
    InvestmentDraft,
    InvestmentType,
    SyntheticCategory,
    Transaction,
    TransactionType,
)


class SeedData(BaseModel):
    """A full set of collections. Empty by default."""

    transactions: list[Transaction] = Field(default_factory=list)
    investments: list[Investment] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)


def build_setup_records(
    accounts: Sequence[AccountDraft],
    debts: Sequence[DebtDraft],
    investments: Sequence[InvestmentDraft],
    now: Optional[datetime] = None,
) -> SeedData:
    """
    Convert setup drafts into accounts, investments and mirror transactions.

    Rules:
    - every named account becomes an Account
    - named investments with a positive balance become an Investment
      (quantity 1, bought and valued at the balance)
    - accounts with a positive balance get an ASSET "Initial Balance" transaction
    - those investments get an ASSET transaction in the 'investment' account
    - named debts with a positive balance get a LIABILITY "Debt" transaction
    """
    now = now or datetime.now()

    named_accounts = [draft for draft in accounts if draft.name]
    funded_investments = [draft for draft in investments if draft.name and draft.balance > 0]
    open_debts = [draft for draft in debts if draft.name and draft.balance > 0]

    result = SeedData()

    for draft in named_accounts:
        result.accounts.append(
            Account(
                name=draft.name,
                type=draft.type,
                balance=draft.balance,
                currency=draft.currency,
            )
        )

    for draft in funded_investments:
        result.investments.append(
            Investment(
                name=draft.name,
                type=InvestmentType.OTHER,
                symbol="",
                quantity=1,
                purchase_price=draft.balance,
                current_price=draft.balance,
                purchase_date=now,
                description=f"Initial {draft.name} investment account",
                currency=draft.currency,
            )
        )

    for draft in named_accounts:
        if draft.balance > 0:
            result.transactions.append(
                Transaction(
                    type=TransactionType.ASSET,
                    amount=draft.balance,
                    currency=draft.currency,
                    description=f"Initial {draft.name} balance",
                    category=SyntheticCategory.INITIAL_BALANCE,
                    date=now,
                    account=draft.type.value,
                )
            )

    for draft in funded_investments:
        result.transactions.append(
            Transaction(
                type=TransactionType.ASSET,
                amount=draft.balance,
                currency=draft.currency,
                description=f"Initial {draft.name} investment",
                category=InvestmentType.OTHER,
                date=now,
                account="investment",
            )
        )

    for draft in open_debts:
        result.transactions.append(
            Transaction(
                type=TransactionType.LIABILITY,
                amount=draft.balance,
                currency=draft.currency,
                description=f"Initial {draft.name} debt",
                category=SyntheticCategory.DEBT,
                date=now,
                account=draft.type.value,
            )
        )

    return result


def _months_ago_label(months: int) -> str:
    if months == 1:
        return "Previous Month"
    return f"{months} Months Ago"


def build_sample_history(
    settings: SeedSettings,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Salary and expense entries for the months before `now`,
    so trend charts have something to compare against.
    """
    now = now or datetime.now()
    history: list[Transaction] = []

    for months_ago, expense in enumerate(settings.sample_expenses, start=1):
        when = now - relativedelta(months=months_ago)
        label = _months_ago_label(months_ago)
        history.append(
            Transaction(
                type=TransactionType.INCOME,
                amount=settings.sample_salary,
                currency=settings.sample_history_currency,
                description=f"{label} Salary",
                category=IncomeCategory.SALARY,
                date=when,
                account="checking",
            )
        )
        history.append(
            Transaction(
                type=TransactionType.EXPENSE,
                amount=expense,
                currency=settings.sample_history_currency,
                description=f"{label} Expenses",
                category=ExpenseCategory.OTHER,
                date=when,
                account="checking",
            )
        )

    return history


def build_seed_data(
    settings: Optional[SeedSettings] = None,
    now: Optional[datetime] = None,
) -> SeedData:
    """Default collections used when storage is empty or unreadable."""
    settings = settings or SeedSettings()
    now = now or datetime.now()

    seed = build_setup_records(
        accounts=settings.accounts,
        debts=settings.debts,
        investments=settings.investments,
        now=now,
    )
    if settings.include_sample_history:
        seed.transactions.extend(build_sample_history(settings, now))
    return seed
