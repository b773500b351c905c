"""
Unit tests for ensemble budget suggestions.
"""
from datetime import datetime
from decimal import Decimal

import pandas as pd
import pytest

from factories.financial_factory import FAMILY_ID, ExpenseFactory, IncomeFactory
from family_finance.models.analytics import (
    AdvisoryKind,
    BudgetStrategy,
    PatternFlag,
    PredictionConfidence,
    TrendDirection,
)
from family_finance.models.financial import BudgetPeriod
from family_finance.services.smart_budget import (
    SmartBudgetPredictor,
    exponential_moving_average,
    linear_fit,
    prediction_confidence,
    recency_weighted_average,
    seasonality_factor,
    trailing_periods,
)
from family_finance.utils.exceptions import ValidationError


def year_of_expenses(category_id, name, amounts, day):
    return [
        ExpenseFactory(
            category_id=category_id,
            category_name=name,
            amount=Decimal(amount),
            occurred_at=datetime(2024, month, day),
        )
        for month, amount in enumerate(amounts, start=1)
    ]


@pytest.fixture
def predictor():
    return SmartBudgetPredictor()


@pytest.fixture
def periods():
    """January to December 2024."""
    return trailing_periods(2024, 12)


@pytest.fixture
def target():
    return BudgetPeriod(year=2025, month=1)


@pytest.fixture
def utilities():
    """100k every month."""
    return year_of_expenses("cat_utilities", "Utilities", [100_000] * 12, day=10)


@pytest.fixture
def dining():
    """10k in January growing by 10k a month to 120k in December."""
    return year_of_expenses("cat_dining", "Dining", [10_000 * m for m in range(1, 13)], day=20)


@pytest.fixture
def salary():
    return [IncomeFactory(amount=Decimal("1000000"), occurred_at=datetime(2024, m, 25)) for m in range(1, 13)]


@pytest.mark.unit
class TestPredictionMethods:
    """Test the individual predictors."""

    def test_linear_fit(self):
        assert linear_fit([1, 2, 3]) == pytest.approx((1.0, 1.0))

    def test_linear_fit_of_constant_series_is_flat(self):
        assert linear_fit([100_000] * 12) == (0.0, 100_000.0)

    def test_exponential_moving_average(self):
        assert exponential_moving_average([100, 200]) == pytest.approx(130.0)
        assert exponential_moving_average([100, 200, 300]) == pytest.approx(181.0)

    def test_recency_weighted_average(self):
        assert recency_weighted_average([100, 200]) == pytest.approx(340 / 2.2)

    @pytest.mark.parametrize("cv,expected", [
        (0.0, PredictionConfidence.VERY_HIGH),
        (14.99, PredictionConfidence.VERY_HIGH),
        (15.0, PredictionConfidence.HIGH),
        (30.0, PredictionConfidence.MEDIUM),
        (50.0, PredictionConfidence.LOW),
    ])
    def test_prediction_confidence(self, cv, expected):
        assert prediction_confidence(cv) == expected

    def test_seasonality_factor(self, periods):
        series = pd.Series([50.0] + [100.0] * 11, index=periods)

        assert seasonality_factor(series, 1) == pytest.approx(50 / (1150 / 12))
        assert seasonality_factor(series, 2) == pytest.approx(100 / (1150 / 12))

    def test_seasonality_factor_without_history(self):
        series = pd.Series([0.0, 100.0], index=trailing_periods(2024, 6, 2))

        assert seasonality_factor(series, 1) == 1.0
        assert seasonality_factor(series, 5) == 1.0

    def test_trailing_periods(self):
        periods = trailing_periods(2025, 2, 3)

        assert [str(p) for p in periods] == ["2024-12", "2025-01", "2025-02"]


@pytest.mark.unit
class TestSmartBudgetPredictor:
    """Test per-category suggestions and the portfolio overlay."""

    def test_categories_ordered_by_prediction(self, predictor, utilities, dining, salary, periods, target):
        report = predictor.suggest(FAMILY_ID, utilities + dining + salary, periods, target)

        assert [s.category_id for s in report.suggestions] == ["cat_utilities", "cat_dining"]
        assert report.months_analyzed == 12
        assert (report.target_year, report.target_month) == (2025, 1)

    def test_stable_category(self, predictor, utilities, periods, target):
        suggestion = predictor.suggest(FAMILY_ID, utilities, periods, target).suggestions[0]

        assert suggestion.prediction.amount == Decimal("100000.00")
        assert suggestion.prediction.confidence == PredictionConfidence.VERY_HIGH
        assert suggestion.prediction.seasonality_factor == 1.0
        assert suggestion.strategies.conservative == suggestion.strategies.aggressive == Decimal("100000.00")
        assert suggestion.recommended_strategy == BudgetStrategy.AI_OPTIMIZED
        assert suggestion.analysis.trend == TrendDirection.STABLE
        assert suggestion.patterns == []
        assert [i.action for i in suggestion.insights] == ["use_ai_optimized"]

    def test_growing_category_methods(self, predictor, dining, periods, target):
        """Linear fit 130k, EMA 97128.04, weighted 76349.21, scaled by January's 10k/65k."""
        prediction = predictor.suggest(FAMILY_ID, dining, periods, target).suggestions[0].prediction

        assert prediction.methods.linear_regression == Decimal("130000.00")
        assert prediction.methods.exponential_moving_average == Decimal("97128.04")
        assert prediction.methods.weighted_average == Decimal("76349.21")
        assert prediction.methods.ensemble == Decimal("98678.10")
        assert prediction.seasonality_factor == 0.1538
        assert prediction.amount == Decimal("15181.25")
        assert prediction.confidence == PredictionConfidence.LOW

    def test_growing_category_strategies(self, predictor, dining, periods, target):
        """Sigma 34520.53 around a 15181.25 prediction."""
        suggestion = predictor.suggest(FAMILY_ID, dining, periods, target).suggestions[0]

        assert suggestion.strategies.conservative == Decimal("67000.00")
        assert suggestion.strategies.moderate == Decimal("33000.00")
        assert suggestion.strategies.aggressive == Decimal("5000.00")
        assert suggestion.strategies.ai_optimized == Decimal("16000.00")
        assert suggestion.recommended_strategy == BudgetStrategy.CONSERVATIVE

    def test_growing_category_analysis(self, predictor, dining, periods, target):
        suggestion = predictor.suggest(FAMILY_ID, dining, periods, target).suggestions[0]

        assert suggestion.analysis.average_monthly == Decimal("65000.00")
        assert suggestion.analysis.volatility == pytest.approx(53.11)
        assert suggestion.analysis.trend_rate == pytest.approx(15.38)
        assert suggestion.analysis.trend == TrendDirection.INCREASING
        assert [p.type for p in suggestion.patterns] == [PatternFlag.GROWTH, PatternFlag.VOLATILE, PatternFlag.SEASONAL]
        assert [i.action for i in suggestion.insights] == ["review_spending", "use_conservative"]
        assert suggestion.insights[0].message == "Dining spending grows 15.4% per month."

    def test_portfolio(self, predictor, utilities, dining, salary, periods, target):
        portfolio = predictor.suggest(FAMILY_ID, utilities + dining + salary, periods, target).portfolio

        assert portfolio.total_predicted_spending == Decimal("115181.25")
        assert portfolio.average_monthly_income == Decimal("1000000.00")
        assert portfolio.ai_optimized_ratio == pytest.approx(11.6)
        assert portfolio.strategy(BudgetStrategy.CONSERVATIVE).total == Decimal("167000.00")
        assert portfolio.strategy(BudgetStrategy.CONSERVATIVE).savings_rate == pytest.approx(83.3)
        assert portfolio.strategy(BudgetStrategy.AI_OPTIMIZED).savings_rate == pytest.approx(88.4)
        assert portfolio.recommended_strategy == BudgetStrategy.AI_OPTIMIZED

    def test_portfolio_notes_and_counts(self, predictor, utilities, dining, salary, periods, target):
        report = predictor.suggest(FAMILY_ID, utilities + dining + salary, periods, target)

        assert [n.kind for n in report.notes] == [AdvisoryKind.OPPORTUNITY, AdvisoryKind.INFO]
        assert "884000.00" in report.notes[0].message
        assert report.notes[1].message == "1 of 2 categories have high-confidence predictions."
        assert report.confidence_counts == {
            PredictionConfidence.VERY_HIGH: 1,
            PredictionConfidence.HIGH: 0,
            PredictionConfidence.MEDIUM: 0,
            PredictionConfidence.LOW: 1,
        }

    def test_without_income(self, predictor, utilities, periods, target):
        report = predictor.suggest(FAMILY_ID, utilities, periods, target)

        assert report.portfolio.ai_optimized_ratio == 0.0
        assert report.portfolio.recommended_strategy == BudgetStrategy.MODERATE
        assert all(item.savings_rate == 0.0 for item in report.portfolio.strategy_comparison)
        assert [n.kind for n in report.notes] == [AdvisoryKind.INFO]

    def test_categories_without_spend_in_series_skipped(self, predictor, periods, target):
        entries = [
            ExpenseFactory(category_id="cat_gifts", amount=Decimal("0"), occurred_at=datetime(2024, 3, 1)),
            ExpenseFactory(category_id="cat_travel", amount=Decimal("500000"), occurred_at=datetime(2023, 8, 1)),
        ]

        report = predictor.suggest(FAMILY_ID, entries, periods, target)

        assert report.suggestions == []
        assert report.portfolio.total_predicted_spending == Decimal("0.00")

    def test_strategies_never_negative(self, predictor, target):
        """A sharp drop pulls the linear fit below zero."""
        entries = year_of_expenses("cat_moving", "Moving", [900_000, 0, 0], day=5)

        suggestion = predictor.suggest(FAMILY_ID, entries, trailing_periods(2024, 3, 3), target).suggestions[0]

        assert suggestion.prediction.methods.linear_regression < 0
        assert suggestion.strategies.aggressive >= 0
        assert suggestion.prediction.amount >= 0

    def test_requires_two_months(self, predictor, utilities, target):
        with pytest.raises(ValidationError):
            predictor.suggest(FAMILY_ID, utilities, trailing_periods(2024, 12, 1), target)
