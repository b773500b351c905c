"""
Unit tests for the composite health score.
"""
from decimal import Decimal

import pytest

from factories.financial_factory import BudgetRecordFactory, GoalProgressFactory, WalletBalanceFactory
from family_finance.models.analytics import HealthRating
from family_finance.services.health_score import (
    HealthScoreCalculator,
    allocate_scores,
    emergency_fund_months,
    rating_for,
    savings_rate,
)


@pytest.fixture
def calculator():
    return HealthScoreCalculator()


def _components(breakdown):
    return {c.name: c for c in breakdown.components}


@pytest.mark.unit
class TestHealthScoreCalculator:
    """Test component scoring and the total."""

    def test_balanced_household(self, calculator):
        """30% savings, budgets, three months of cover and a half-funded goal."""
        breakdown = calculator.calculate(
            income_total=30_000_000,
            expense_total=21_000_000,
            months=3,
            budgets=[BudgetRecordFactory()],
            wallets=[WalletBalanceFactory(balance=Decimal("21000000"))],
            goals=[GoalProgressFactory()],
        )
        components = _components(breakdown)

        assert components["savings_rate"].score == 30
        assert components["budget_adherence"].score == 25
        assert components["emergency_fund"].raw_score == pytest.approx(12.5)
        assert components["emergency_fund"].score == 13
        assert components["goal_progress"].score == 10
        assert breakdown.total == 78
        assert breakdown.rating == HealthRating.GOOD

    def test_perfect_score(self, calculator):
        breakdown = calculator.calculate(
            income_total=10_000_000,
            expense_total=2_000_000,
            months=1,
            budgets=[BudgetRecordFactory()],
            wallets=[WalletBalanceFactory(balance=Decimal("100000000"))],
            goals=[GoalProgressFactory(contributed_amount=Decimal("20000000"))],
        )

        assert breakdown.total == 100
        assert breakdown.rating == HealthRating.EXCELLENT
        assert [c.score for c in breakdown.components] == [30, 25, 25, 20]

    def test_empty_household(self, calculator):
        breakdown = calculator.calculate(0, 0, 3, [], [], [])

        assert breakdown.total == 0
        assert breakdown.rating == HealthRating.NEEDS_IMPROVEMENT
        assert all(c.score == 0 for c in breakdown.components)

    def test_inactive_budgets_and_goals_ignored(self, calculator):
        breakdown = calculator.calculate(
            income_total=1000,
            expense_total=1000,
            months=1,
            budgets=[BudgetRecordFactory(is_active=False)],
            wallets=[],
            goals=[GoalProgressFactory(is_active=False, contributed_amount=Decimal("10000000"))],
        )
        components = _components(breakdown)

        assert components["budget_adherence"].score == 0
        assert components["goal_progress"].score == 0

    def test_overspending_scores_zero_savings(self, calculator):
        breakdown = calculator.calculate(1000, 2000, 1, [], [], [])

        assert _components(breakdown)["savings_rate"].raw_score == 0.0

    @pytest.mark.parametrize("income,expense,balance,contributed", [
        (100, 90, 40, "3333333.33"),
        (30_000_000, 21_000_000, 21_000_000, "5000000"),
        (7_000_000, 6_100_000, 3_300_000, "1234567"),
        (1, 0, 0, "0"),
        (0, 500, 2_000, "9999999.99"),
    ])
    def test_components_sum_to_total(self, calculator, income, expense, balance, contributed):
        """Reported component scores always add up to the total."""
        breakdown = calculator.calculate(
            income_total=income,
            expense_total=expense,
            months=3,
            budgets=[BudgetRecordFactory()],
            wallets=[WalletBalanceFactory(balance=Decimal(balance))],
            goals=[GoalProgressFactory(contributed_amount=Decimal(contributed))],
        )

        assert sum(c.score for c in breakdown.components) == breakdown.total
        for component in breakdown.components:
            assert 0 <= component.score <= component.max_score


@pytest.mark.unit
class TestHealthHelpers:
    """Test the standalone helpers."""

    def test_savings_rate(self):
        assert savings_rate(1000, 750) == pytest.approx(25.0)
        assert savings_rate(0, 750) == 0.0

    def test_emergency_fund_months(self):
        assert emergency_fund_months(9000, 3000) == pytest.approx(3.0)
        assert emergency_fund_months(9000, 0) == 0.0

    @pytest.mark.parametrize("total,rating", [
        (80, HealthRating.EXCELLENT),
        (79, HealthRating.GOOD),
        (60, HealthRating.GOOD),
        (59, HealthRating.FAIR),
        (40, HealthRating.FAIR),
        (39, HealthRating.NEEDS_IMPROVEMENT),
    ])
    def test_rating_bands(self, total, rating):
        assert rating_for(total) == rating

    def test_allocate_scores_largest_remainder(self):
        assert allocate_scores([10.0, 25.0, 5.5556, 6.6667], 47) == [10, 25, 5, 7]

    def test_allocate_scores_ties_go_to_first(self):
        assert allocate_scores([0.4, 0.4, 0.4], 1) == [1, 0, 0]
