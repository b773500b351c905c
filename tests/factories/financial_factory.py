"""
Factories for financial input records.
"""

from datetime import datetime
from decimal import Decimal

import factory
from faker import Faker

from family_finance.models.financial import (
    BudgetRecord,
    EntryKind,
    GoalProgress,
    LedgerEntry,
    LiabilityPayment,
    LiabilityRecord,
    WalletBalance,
)

fake = Faker()

FAMILY_ID = "fam_000001"


def money(low: int, high: int) -> Decimal:
    return Decimal(fake.random_int(min=low, max=high))


class LedgerEntryFactory(factory.Factory):
    """Factory for ledger entries."""

    class Meta:
        model = LedgerEntry

    family_id = FAMILY_ID
    id = factory.Sequence(lambda n: f"txn_{n:06d}")
    kind = EntryKind.EXPENSE
    amount = factory.LazyFunction(lambda: money(10_000, 500_000))
    occurred_at = datetime(2024, 5, 15, 12, 0)
    category_id = "cat_groceries"
    category_name = "Groceries"
    wallet_id = "wal_000001"
    description = factory.Faker("sentence", nb_words=3)


class ExpenseFactory(LedgerEntryFactory):
    """Factory for expense entries."""

    kind = EntryKind.EXPENSE


class IncomeFactory(LedgerEntryFactory):
    """Factory for income entries."""

    kind = EntryKind.INCOME
    amount = factory.LazyFunction(lambda: money(5_000_000, 20_000_000))
    category_id = "cat_salary"
    category_name = "Salary"


class BudgetRecordFactory(factory.Factory):
    """Factory for monthly budgets."""

    class Meta:
        model = BudgetRecord

    family_id = FAMILY_ID
    category_id = "cat_groceries"
    category_name = "Groceries"
    period_year = 2024
    period_month = 5
    amount = Decimal("1000000")
    is_active = True


class LiabilityRecordFactory(factory.Factory):
    """Factory for liabilities."""

    class Meta:
        model = LiabilityRecord

    family_id = FAMILY_ID
    id = factory.Sequence(lambda n: f"lia_{n:06d}")
    name = factory.Faker("company")
    principal = Decimal("12000000")
    remaining_balance = factory.LazyAttribute(lambda obj: obj.principal)
    annual_interest_rate_percent = Decimal("12")
    monthly_payment_amount = Decimal("1200000")
    origination_date = datetime(2023, 1, 1)
    due_date = None


class LiabilityPaymentFactory(factory.Factory):
    """Factory for liability payments."""

    class Meta:
        model = LiabilityPayment

    liability_id = "lia_000001"
    amount = Decimal("1200000")
    principal_component = Decimal("1080000")
    interest_component = Decimal("120000")
    paid_at = datetime(2024, 1, 5)


class WalletBalanceFactory(factory.Factory):
    """Factory for wallet balances."""

    class Meta:
        model = WalletBalance

    family_id = FAMILY_ID
    wallet_id = factory.Sequence(lambda n: f"wal_{n:06d}")
    name = factory.Faker("word")
    balance = factory.LazyFunction(lambda: money(0, 10_000_000))


class GoalProgressFactory(factory.Factory):
    """Factory for savings goals."""

    class Meta:
        model = GoalProgress

    family_id = FAMILY_ID
    goal_id = factory.Sequence(lambda n: f"goal_{n:06d}")
    name = factory.Faker("word")
    target_amount = Decimal("10000000")
    contributed_amount = Decimal("5000000")
    deadline = None
    is_active = True
