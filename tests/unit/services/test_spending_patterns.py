"""
Unit tests for spending pattern analysis.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from factories.financial_factory import ExpenseFactory, IncomeFactory
from family_finance.models.analytics import TrendDirection
from family_finance.services.spending_patterns import SpendingPatternAnalyzer


@pytest.mark.unit
class TestSpendingPatternAnalyzer:
    """Test per-category pattern aggregation."""

    @pytest.fixture
    def analyzer(self):
        return SpendingPatternAnalyzer()

    def test_patterns_sorted_by_average_amount(self, analyzer, sample_expenses, window):
        """Test the category with the highest average comes first."""
        patterns = analyzer.analyze(sample_expenses, window)

        assert [p.category_id for p in patterns] == ["cat_rent", "cat_groceries"]

    def test_pattern_statistics(self, analyzer, sample_expenses, window):
        """Test average, monthly average, median and spread of one category."""
        groceries = analyzer.analyze(sample_expenses, window)[1]

        assert groceries.category_name == "Groceries"
        assert groceries.frequency == 4
        assert groceries.total_amount == Decimal("2200000.00")
        assert groceries.average_amount == Decimal("550000.00")
        assert groceries.monthly_average == Decimal("733333.33")
        assert groceries.median_amount == Decimal("400000.00")
        assert groceries.standard_deviation == Decimal("165831.24")

    def test_trend_by_window_halves(self, analyzer, sample_expenses, window):
        """Test the halves are split at the elapsed-time midpoint of the window."""
        rent, groceries = analyzer.analyze(sample_expenses, window)

        assert groceries.trend == TrendDirection.INCREASING
        assert groceries.trend_percentage == 75.0
        assert rent.trend == TrendDirection.STABLE
        assert rent.trend_percentage == 0.0

    def test_single_entry_is_stable(self, analyzer, window):
        entries = [ExpenseFactory(amount=Decimal("90000"), occurred_at=datetime(2024, 6, 1))]

        pattern = analyzer.analyze(entries, window)[0]

        assert pattern.trend == TrendDirection.STABLE
        assert pattern.standard_deviation == Decimal("0.00")

    def test_income_and_out_of_window_entries_ignored(self, analyzer, window):
        entries = [
            IncomeFactory(occurred_at=datetime(2024, 5, 1)),
            ExpenseFactory(occurred_at=datetime(2024, 1, 1)),
            ExpenseFactory(occurred_at=datetime(2024, 6, 16)),
        ]

        assert analyzer.analyze(entries, window) == []

    def test_uncategorized_bucket(self, analyzer, window):
        entries = [
            ExpenseFactory(category_id=None, category_name=None, occurred_at=datetime(2024, 4, 1)),
            ExpenseFactory(category_id=None, category_name=None, occurred_at=datetime(2024, 5, 1)),
        ]

        patterns = analyzer.analyze(entries, window)

        assert len(patterns) == 1
        assert patterns[0].category_id == "uncategorized"
        assert patterns[0].category_name == "Uncategorized"
        assert patterns[0].frequency == 2

    def test_zero_first_half_is_stable(self, analyzer, window):
        """No spend in the older half gives a 0% trend."""
        entries = [
            ExpenseFactory(occurred_at=datetime(2024, 5, 10)),
            ExpenseFactory(occurred_at=datetime(2024, 6, 10)),
        ]

        pattern = analyzer.analyze(entries, window)[0]

        assert pattern.trend == TrendDirection.STABLE
        assert pattern.trend_percentage == 0.0
