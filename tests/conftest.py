"""
Global pytest configuration and fixtures.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from factories.financial_factory import (
    FAMILY_ID,
    BudgetRecordFactory,
    ExpenseFactory,
    GoalProgressFactory,
    IncomeFactory,
    LiabilityRecordFactory,
    WalletBalanceFactory,
)
from family_finance.config import Settings
from family_finance.infrastructure.repository import InMemoryLedgerRepository
from family_finance.models.financial import AnalysisWindow
from family_finance.services.analytics import FinancialAnalyticsService


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings configuration."""
    return Settings(
        app_name="family-finance-analytics-test",
        version="1.0.0-test",
        debug=True,
        environment="testing",
        log_level="DEBUG",
        log_format="console",
        pattern_months=3,
        recommendation_months=6,
        forecast_months=3,
        default_extra_payment=0.0,
        extra_payment_ladder="100000,250000,500000,1000000,2000000"
    )


@pytest.fixture
def family_id() -> str:
    return FAMILY_ID


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for all analytics."""
    return datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def window(family_id, now) -> AnalysisWindow:
    """Three months ending at ``now``: 2024-03-15 to 2024-06-15."""
    return AnalysisWindow.trailing(family_id, 3, now)


@pytest.fixture
def sample_expenses():
    """Groceries rising between the halves of the window, rent flat."""
    return [
        ExpenseFactory(id="exp_1", amount=Decimal("400000"), occurred_at=datetime(2024, 3, 20)),
        ExpenseFactory(id="exp_2", amount=Decimal("400000"), occurred_at=datetime(2024, 4, 10)),
        ExpenseFactory(id="exp_3", amount=Decimal("600000"), occurred_at=datetime(2024, 5, 5)),
        ExpenseFactory(id="exp_4", amount=Decimal("800000"), occurred_at=datetime(2024, 6, 1)),
        ExpenseFactory(
            id="exp_5", amount=Decimal("3000000"), occurred_at=datetime(2024, 3, 25),
            category_id="cat_rent", category_name="Rent"
        ),
        ExpenseFactory(
            id="exp_6", amount=Decimal("3000000"), occurred_at=datetime(2024, 5, 25),
            category_id="cat_rent", category_name="Rent"
        ),
    ]


@pytest.fixture
def sample_income():
    return [
        IncomeFactory(id="inc_1", amount=Decimal("10000000"), occurred_at=datetime(2024, 3, 28)),
        IncomeFactory(id="inc_2", amount=Decimal("10000000"), occurred_at=datetime(2024, 4, 28)),
        IncomeFactory(id="inc_3", amount=Decimal("10000000"), occurred_at=datetime(2024, 5, 28)),
    ]


@pytest.fixture
def sample_liability():
    return LiabilityRecordFactory(id="lia_000001", name="Car loan")


@pytest.fixture
def repository(sample_expenses, sample_income, sample_liability) -> InMemoryLedgerRepository:
    """In-memory data for one family."""
    return InMemoryLedgerRepository(
        entries=sample_expenses + sample_income,
        budgets=[BudgetRecordFactory(period_month=5, amount=Decimal("500000"))],
        liabilities=[sample_liability],
        wallets=[WalletBalanceFactory(balance=Decimal("20000000"))],
        goals=[GoalProgressFactory()],
    )


@pytest.fixture
def analytics_service(repository, test_settings) -> FinancialAnalyticsService:
    return FinancialAnalyticsService(repository, test_settings)
