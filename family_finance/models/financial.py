"""
Financial input records: ledger entries, budgets, liabilities, wallets, goals.
These are owned by the data-entry layer; the analytics core only reads them.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from ..utils.dates import naive, shift_months
from .base import FamilyOwnedModel, ValueObject, WallClock

UNCATEGORIZED = "uncategorized"


class EntryKind(str, Enum):
    """Ledger entry kinds."""
    INCOME = "income"
    EXPENSE = "expense"


class LedgerEntry(FamilyOwnedModel):
    """A single income or expense transaction."""

    id: str
    kind: EntryKind
    amount: Decimal = Field(..., ge=0, description="Unsigned amount; kind carries the sign")
    occurred_at: WallClock
    category_id: Optional[str] = Field(None, description="Transaction category")
    category_name: Optional[str] = Field(None, max_length=100)
    wallet_id: str = Field(..., description="Wallet the entry was booked against")
    description: str = Field(default="", max_length=200)

    @property
    def category_key(self) -> str:
        """Grouping key; entries without a category share one bucket."""
        return self.category_id or UNCATEGORIZED

    @property
    def display_category(self) -> str:
        return self.category_name or self.category_id or "Uncategorized"


class BudgetRecord(FamilyOwnedModel):
    """Monthly budget for a category."""

    category_id: str
    category_name: Optional[str] = Field(None, max_length=100)
    period_year: int = Field(..., ge=1900, le=9999)
    period_month: int = Field(..., ge=1, le=12)
    amount: Decimal = Field(..., ge=0)
    is_active: bool = Field(default=True)


class LiabilityRecord(FamilyOwnedModel):
    """Loan or other debt being paid down."""

    id: str
    name: str = Field(..., min_length=1, max_length=100)
    principal: Decimal = Field(..., gt=0)
    remaining_balance: Decimal = Field(..., ge=0)
    annual_interest_rate_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    monthly_payment_amount: Optional[Decimal] = Field(None, ge=0)
    origination_date: WallClock
    due_date: Optional[WallClock] = None

    @model_validator(mode="after")
    def validate_remaining_balance(self):
        """Remaining balance cannot exceed the original principal."""
        if self.remaining_balance > self.principal:
            raise ValueError("Remaining balance cannot exceed principal")
        return self


class LiabilityPayment(ValueObject):
    """A recorded payment against a liability."""

    liability_id: str
    amount: Decimal = Field(..., ge=0)
    principal_component: Decimal = Field(default=Decimal("0"), ge=0)
    interest_component: Decimal = Field(default=Decimal("0"), ge=0)
    paid_at: WallClock


class WalletBalance(FamilyOwnedModel):
    """Current balance of a family wallet."""

    wallet_id: str
    name: str = Field(default="", max_length=100)
    balance: Decimal = Field(default=Decimal("0.00"))


class GoalProgress(FamilyOwnedModel):
    """Savings goal with contributions to date."""

    goal_id: str
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: Decimal = Field(..., gt=0)
    contributed_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    deadline: Optional[WallClock] = None
    is_active: bool = Field(default=True)

    @property
    def progress_percent(self) -> float:
        """Contributions as a percentage of the target."""
        return float(self.contributed_amount) / float(self.target_amount) * 100


class AnalysisWindow(ValueObject):
    """Historical window an analytics computation looks at."""

    family_id: str
    start: WallClock
    end: WallClock
    months: int = Field(..., ge=1, le=120, description="Calendar months covered by the window")

    @model_validator(mode="after")
    def validate_range(self):
        """Validate end is after start."""
        if self.end <= self.start:
            raise ValueError("Window end must be after window start")
        return self

    @classmethod
    def trailing(cls, family_id: str, months: int, now: datetime) -> "AnalysisWindow":
        """Window covering the ``months`` calendar months that end at ``now``."""
        end = naive(now)
        return cls(family_id=family_id, start=shift_months(end, -months), end=end, months=months)


class BudgetPeriod(ValueObject):
    """Target budget month."""

    year: int = Field(..., ge=1900, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def following(cls, now: datetime) -> "BudgetPeriod":
        """The month after ``now``."""
        moment = shift_months(naive(now), 1)
        return cls(year=moment.year, month=moment.month)

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


class PaymentPolicy(ValueObject):
    """Extra payments layered on top of the base monthly payment."""

    one_time_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Applied once before the first month")
    recurring_extra_per_month: Decimal = Field(default=Decimal("0"), ge=0)
    yearly_bonus_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Added every twelfth month")

    @field_validator("one_time_amount", "recurring_extra_per_month", "yearly_bonus_amount")
    @classmethod
    def validate_precision(cls, v):
        """Validate amount precision."""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount cannot have more than 2 decimal places")
        return v
