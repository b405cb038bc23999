"""
Core Data Models for the Finance Tracker

These models define the schemas for every record the tracker stores
and every figure the analytics engine derives from them.

DESIGN DECISION: Amounts are stored as Decimal and must be non-negative.
The sign of a transaction is carried by its type, never by its amount.

DESIGN DECISION: Records serialise with camelCase aliases so JSON written
by the browser version of the app loads unchanged, and our own exports
round-trip through the same load path.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    PlainSerializer,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def generate_id() -> str:
    """Create a new record identifier. Identifiers are never reused."""
    return str(uuid4())


def to_local_naive(value: Any) -> Any:
    """
    Normalise a date value to a naive datetime in local time.

    Month bucketing works on the calendar month in local time, so aware
    datetimes (e.g. ISO strings ending in 'Z') are converted first.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return value


def _json_number(value: Decimal) -> Union[int, float]:
    # Whole amounts stay integers on the wire: 25000, not 25000.0
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Exact in Python, a plain JSON number in stored and exported documents
Money = Annotated[Decimal, PlainSerializer(_json_number, when_used="json")]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """Currencies a record can be denominated in."""
    USD = "USD"
    HKD = "HKD"


class TransactionType(str, Enum):
    """
    Kind of financial event.

    ASSET, INCOME and INVESTMENT count towards net worth,
    LIABILITY and EXPENSE count against it.
    """
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    TRANSFER = "transfer"
    ASSET = "asset"
    LIABILITY = "liability"


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    OTHER = "other"


class IncomeCategory(str, Enum):
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT_RETURN = "investment_return"
    BUSINESS = "business"
    OTHER = "other"


class InvestmentType(str, Enum):
    STOCKS = "stocks"
    BONDS = "bonds"
    CRYPTO = "crypto"
    REAL_ESTATE = "real_estate"
    MUTUAL_FUNDS = "mutual_funds"
    OTHER = "other"


class SyntheticCategory(str, Enum):
    """
    Labels for records generated by the setup flow rather than entered
    by the user. Kept apart from the user-facing enumerations.
    """
    INITIAL_BALANCE = "Initial Balance"
    DEBT = "Debt"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    CREDIT = "credit"
    DEBIT = "debit"
    BROKERAGE = "brokerage"
    RETIREMENT = "retirement"
    CRYPTO = "crypto"


class DebtType(str, Enum):
    CREDIT_CARD = "credit_card"
    MORTGAGE = "mortgage"
    PERSONAL_LOAN = "personal_loan"
    STUDENT_LOAN = "student_loan"
    CAR_LOAN = "car_loan"
    OTHER = "other"


class Period(str, Enum):
    """Dashboard period filter."""
    ALL = "all"
    YEARLY = "yearly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


# A category is one of the enumerations above, or a free-form label.
Category = Union[
    ExpenseCategory,
    IncomeCategory,
    InvestmentType,
    SyntheticCategory,
    str,
]

_CATEGORY_RESOLUTION: dict[TransactionType, tuple[type[Enum], ...]] = {
    TransactionType.INCOME: (IncomeCategory, ExpenseCategory, InvestmentType, SyntheticCategory),
    TransactionType.EXPENSE: (ExpenseCategory, IncomeCategory, InvestmentType, SyntheticCategory),
    TransactionType.INVESTMENT: (InvestmentType, IncomeCategory, ExpenseCategory, SyntheticCategory),
    TransactionType.ASSET: (InvestmentType, SyntheticCategory, IncomeCategory, ExpenseCategory),
    TransactionType.LIABILITY: (SyntheticCategory, ExpenseCategory, IncomeCategory, InvestmentType),
    TransactionType.TRANSFER: (ExpenseCategory, IncomeCategory, InvestmentType, SyntheticCategory),
}


def resolve_category(transaction_type: TransactionType, raw: Any) -> Category:
    """
    Resolve a raw category value into the variant matching the transaction type.

    'other' exists in three enumerations, so the type decides which one wins.
    Unknown strings are kept as free-form labels.
    """
    if isinstance(raw, Enum):
        return raw
    for enum_cls in _CATEGORY_RESOLUTION[transaction_type]:
        try:
            return enum_cls(raw)
        except ValueError:
            continue
    return str(raw)


def category_key(category: Category) -> str:
    """Plain string form of a category, used for grouping and display."""
    if isinstance(category, Enum):
        return category.value
    return str(category)


# =============================================================================
# RECORDS
# =============================================================================

class RecordModel(BaseModel):
    """Base for persisted records: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Transaction(RecordModel):
    """
    An immutable financial event.

    Updates never mutate an instance; the record store builds a new,
    re-validated Transaction with the same id.
    """

    id: str = Field(
        default_factory=generate_id,
        description="Unique transaction ID"
    )
    type: TransactionType
    amount: Money = Field(
        ...,
        ge=0,
        description="Magnitude in `currency`; the sign comes from `type`"
    )
    currency: Currency = Currency.USD
    description: str = ""
    category: Category = Field(
        default=ExpenseCategory.OTHER,
        description="Category resolved against the transaction type"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction is attributed (local time)"
    )
    account: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def resolve_category_variant(cls, data: Any) -> Any:
        """
        Pick the category enumeration that matches the transaction type.

        A missing category becomes that type's 'other'.
        """
        if not isinstance(data, dict):
            return data
        raw_type = data.get("type")
        if raw_type is None:
            return data
        try:
            transaction_type = TransactionType(raw_type)
        except ValueError:
            # Let field validation report the bad type
            return data
        raw_category = data.get("category")
        if raw_category is None:
            raw_category = "other"
        return {**data, "category": resolve_category(transaction_type, raw_category)}

    @field_validator('date', mode='before')
    @classmethod
    def normalise_date(cls, v: Any) -> Any:
        return to_local_naive(v)

    @field_validator('date', mode='after')
    @classmethod
    def strip_timezone(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def category_key(self) -> str:
        return category_key(self.category)


class Investment(RecordModel):
    """
    A holding with a cost basis and a current value.

    Derived figures are computed on access, never stored.
    """

    id: str = Field(default_factory=generate_id)
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType = InvestmentType.OTHER
    symbol: Optional[str] = None
    quantity: Money = Field(..., ge=0)
    purchase_price: Money = Field(..., ge=0)
    current_price: Money = Field(..., ge=0)
    purchase_date: datetime = Field(default_factory=datetime.now)
    currency: Currency = Currency.USD
    description: Optional[str] = None

    @field_validator('purchase_date', mode='before')
    @classmethod
    def normalise_purchase_date(cls, v: Any) -> Any:
        return to_local_naive(v)

    @field_validator('purchase_date', mode='after')
    @classmethod
    def strip_timezone(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def cost_basis(self) -> float:
        return float(self.purchase_price * self.quantity)

    @property
    def current_value(self) -> float:
        return float(self.current_price * self.quantity)

    @property
    def gain_loss(self) -> float:
        """Absolute gain (positive) or loss (negative)."""
        return float((self.current_price - self.purchase_price) * self.quantity)

    @property
    def gain_loss_percentage(self) -> float:
        """
        Relative gain or loss in percent.

        A zero purchase price has no meaningful ratio; report 0.0 so
        display code always receives a number.
        """
        if self.purchase_price == 0:
            return 0.0
        change = (self.current_price - self.purchase_price) / self.purchase_price
        return float(change * 100)


class Account(RecordModel):
    """A named money container. Its balance is not derived from transactions."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(..., min_length=1, max_length=200)
    type: AccountType = AccountType.CHECKING
    balance: Money = Decimal("0")
    currency: Currency = Currency.USD


# =============================================================================
# SETUP DRAFTS
# =============================================================================

class AccountDraft(BaseModel):
    """A banking account as entered in the initial setup flow."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str
    type: AccountType = AccountType.CHECKING
    balance: Decimal = Field(default=Decimal("0"), ge=0)
    currency: Currency = Currency.USD


class DebtDraft(BaseModel):
    """A debt or loan as entered in the initial setup flow."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str
    type: DebtType = DebtType.CREDIT_CARD
    balance: Decimal = Field(default=Decimal("0"), ge=0)
    minimum_payment: Decimal = Field(default=Decimal("0"), ge=0)
    due_date: Optional[date] = None
    currency: Currency = Currency.USD


class InvestmentDraft(BaseModel):
    """An investment account as entered in the initial setup flow."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str
    type: str = "investment"
    balance: Decimal = Field(default=Decimal("0"), ge=0)
    currency: Currency = Currency.HKD


# =============================================================================
# CURRENCY MODELS
# =============================================================================

class CurrencyRate(BaseModel):
    """Multiplicative rate: amount_in_to = amount_in_from * rate."""

    from_currency: str
    to_currency: str
    rate: float = Field(..., gt=0)
    timestamp: datetime = Field(default_factory=datetime.now)


class CurrencyConversion(BaseModel):
    """Result of a conversion. Always produced, even when no rate was found."""

    amount: float
    converted_amount: float
    rate: float
    from_currency: str
    to_currency: str
    timestamp: datetime = Field(default_factory=datetime.now)


# =============================================================================
# ANALYTICS RESULTS
# =============================================================================

class MonthlyTrend(BaseModel):
    month: str
    income: float
    expenses: float
    savings: float


class CategoryTotal(BaseModel):
    category: str
    amount: float
    count: int


class CategoryBreakdown(BaseModel):
    """A category total with its share of the type's total."""
    category: str
    label: str
    amount: float
    count: int
    percentage: float
    color: str


class TrendIndicator(BaseModel):
    """
    Month-over-month change collapsed to magnitude and direction.

    The presentation layer re-attaches the direction for colouring.
    """
    value: float = Field(..., ge=0)
    is_positive: bool


class DashboardSummary(BaseModel):
    """All-time totals plus the current month's figures."""
    total_income: float
    total_expenses: float
    total_investments: float
    net_worth: float
    monthly_income: float
    monthly_expenses: float
    monthly_savings: float


class DashboardReport(BaseModel):
    """Everything the dashboard page displays for one period."""
    period: Period
    generated_at: datetime
    total_income: float
    total_expenses: float
    total_assets: float
    total_liabilities: float
    net_worth: float
    savings_rate: float
    average_monthly_income: float
    average_monthly_expenses: float
    income_trend: TrendIndicator
    expense_trend: TrendIndicator
    asset_trend: TrendIndicator
    net_worth_trend: TrendIndicator
    monthly_trends: list[MonthlyTrend]
    expense_breakdown: list[CategoryBreakdown]
    income_breakdown: list[CategoryBreakdown]


class MonthComparison(BaseModel):
    metric: str
    current: float
    previous: float


class AnalyticsReport(BaseModel):
    """Trend analysis over a configurable window of months."""
    time_range_months: int
    generated_at: datetime
    monthly_trends: list[MonthlyTrend]
    expense_breakdown: list[CategoryBreakdown]
    income_breakdown: list[CategoryBreakdown]
    comparison: list[MonthComparison]
    average_monthly_income: float
    average_monthly_expenses: float
    average_monthly_savings: float
    savings_rate: float
    top_expense_category: Optional[str] = None
    primary_income_source: Optional[str] = None
    income_source_count: int
    average_expense_transaction: float
    transaction_count: int


class HoldingPerformance(BaseModel):
    id: str
    name: str
    currency: Currency
    cost_basis: float
    current_value: float
    gain_loss: float
    gain_loss_percentage: float


class PortfolioSummary(BaseModel):
    holdings: list[HoldingPerformance]
    total_cost_basis: float
    total_current_value: float
    total_gain_loss: float
    total_gain_loss_percentage: float


# =============================================================================
# EXPORT
# =============================================================================

class ExportSnapshot(BaseModel):
    """
    The backup document written by 'export data'.

    Must load back through the same import path.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    transactions: list[Transaction] = Field(default_factory=list)
    investments: list[Investment] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)
    export_date: datetime = Field(default_factory=datetime.now)
