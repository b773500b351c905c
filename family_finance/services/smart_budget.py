"""
Smart budget suggestions from an ensemble prediction over monthly spend.

Each expense category gets a calendar-month series (oldest first). A linear
fit, an exponential moving average and a recency-weighted average are blended
into one prediction. The blend is scaled by the seasonality of the target
month and turned into four budget strategies.
"""
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
import structlog

from ..models.analytics import (
    AdvisoryKind,
    AdvisoryNote,
    BudgetStrategies,
    BudgetStrategy,
    CategoryInsight,
    MonthlySeriesAnalysis,
    PatternFlag,
    PortfolioAnalysis,
    PredictionConfidence,
    PredictionMethods,
    Severity,
    SmartBudgetReport,
    SmartBudgetSuggestion,
    SpendingPatternNote,
    SpendPrediction,
    StrategyTotal,
)
from ..models.financial import BudgetPeriod, EntryKind, LedgerEntry
from ..utils.constants import (
    AGGRESSIVE_SIGMA,
    AI_OPTIMIZED_MAX_RATIO,
    CONSERVATIVE_SIGMA,
    EMA_ALPHA,
    EMA_WEIGHT,
    GROWTH_PATTERN_RATE,
    HIGH_SAVINGS_POTENTIAL_RATIO,
    LINEAR_FIT_WEIGHT,
    MODERATE_SIGMA,
    PREDICTION_HIGH_CV,
    PREDICTION_MEDIUM_CV,
    PREDICTION_VERY_HIGH_CV,
    RECENCY_AVERAGE_WEIGHT,
    RECENCY_WEIGHT_STEP,
    SEASONAL_SPREAD_RATIO,
    SMART_BUDGET_MONTHS,
    VOLATILE_CATEGORY_CV,
)
from ..utils.exceptions import ValidationError
from ..utils.money import ceil_to_unit, to_money
from . import statistics
from .ledger import group_by_category, monthly_totals

logger = structlog.get_logger()

HIGH_CONFIDENCE = (PredictionConfidence.VERY_HIGH, PredictionConfidence.HIGH)


def linear_fit(values: Sequence[float]) -> Tuple[float, float]:
    """Least-squares ``(slope, intercept)`` of values against their index."""
    y = np.asarray(values, dtype=float)
    x = np.arange(len(y), dtype=float)
    n = len(y)
    slope = (n * (x * y).sum() - x.sum() * y.sum()) / (n * (x * x).sum() - x.sum() ** 2)
    intercept = (y.sum() - slope * x.sum()) / n
    return float(slope), float(intercept)


def exponential_moving_average(values: Sequence[float], alpha: float = EMA_ALPHA) -> float:
    """EMA seeded with the first value."""
    return float(pd.Series(values, dtype=float).ewm(alpha=alpha, adjust=False).mean().iloc[-1])


def recency_weighted_average(values: Sequence[float]) -> float:
    """Average where month ``i`` weighs ``1 + 0.2 * i``."""
    weights = 1 + RECENCY_WEIGHT_STEP * np.arange(len(values))
    return float(np.average(np.asarray(values, dtype=float), weights=weights))


def prediction_confidence(cv: float) -> PredictionConfidence:
    if cv < PREDICTION_VERY_HIGH_CV:
        return PredictionConfidence.VERY_HIGH
    if cv < PREDICTION_HIGH_CV:
        return PredictionConfidence.HIGH
    if cv < PREDICTION_MEDIUM_CV:
        return PredictionConfidence.MEDIUM
    return PredictionConfidence.LOW


def seasonality_factor(series: pd.Series, month: int) -> float:
    """
    Latest spend in the same calendar month relative to the series average.

    Returns 1.0 when that month is not in the series or had no spend.
    """
    average = float(series.mean())
    same_month = series[series.index.month == month]
    if same_month.empty or average <= 0:
        return 1.0
    factor = float(same_month.iloc[-1]) / average
    return factor if factor > 0 else 1.0


class SmartBudgetPredictor:
    """Ensemble spend predictions and budget strategies per category."""

    def suggest(
        self,
        family_id: str,
        entries: Sequence[LedgerEntry],
        periods: pd.PeriodIndex,
        target: BudgetPeriod
    ) -> SmartBudgetReport:
        """
        Suggest budgets for ``target`` from the monthly series over ``periods``.

        Args:
            family_id: family the entries belong to
            entries: income and expense entries covering ``periods``
            periods: consecutive calendar months, oldest first
            target: month the suggestions are for

        Returns:
            Report with per-category suggestions, portfolio analysis and notes

        Raises:
            ValidationError: fewer than two months to fit a trend on
        """
        if len(periods) < 2:
            raise ValidationError(
                message="At least two months are needed for smart suggestions",
                details=[f"months: {len(periods)}"]
            )

        expenses = [e for e in entries if e.kind == EntryKind.EXPENSE]
        income = [e for e in entries if e.kind == EntryKind.INCOME]

        suggestions = []
        for category_entries in group_by_category(expenses).values():
            series = monthly_totals(category_entries, periods)
            # entries outside the series drop out of the totals
            if not (series > 0).any():
                continue
            suggestions.append(self._suggest_category(category_entries[0], series, target))
        suggestions.sort(key=lambda s: (-s.prediction.amount, s.category_name))

        average_income = float(monthly_totals(income, periods).sum()) / len(periods)
        portfolio = self._portfolio(suggestions, average_income)
        notes = self._portfolio_notes(suggestions, portfolio)

        logger.info(
            "Smart budget suggestions generated",
            family_id=family_id,
            target_period=target.label,
            categories=len(suggestions),
            recommended_strategy=portfolio.recommended_strategy.value
        )

        return SmartBudgetReport(
            family_id=family_id,
            target_year=target.year,
            target_month=target.month,
            months_analyzed=len(periods),
            suggestions=suggestions,
            portfolio=portfolio,
            notes=notes,
            confidence_counts={
                level: sum(1 for s in suggestions if s.prediction.confidence == level)
                for level in PredictionConfidence
            },
        )

    def _suggest_category(
        self,
        first: LedgerEntry,
        series: pd.Series,
        target: BudgetPeriod
    ) -> SmartBudgetSuggestion:
        values = series.tolist()
        average = statistics.mean(values)
        sigma = statistics.stddev(values)
        cv = statistics.coefficient_of_variation(values)

        slope, intercept = linear_fit(values)
        linear = slope * len(values) + intercept
        ema = exponential_moving_average(values)
        weighted = recency_weighted_average(values)
        ensemble = linear * LINEAR_FIT_WEIGHT + ema * EMA_WEIGHT + weighted * RECENCY_AVERAGE_WEIGHT
        factor = seasonality_factor(series, target.month)
        predicted = max(0.0, ensemble * factor)

        confidence = prediction_confidence(cv)
        strategies = BudgetStrategies(
            conservative=ceil_to_unit(max(0.0, predicted + sigma * CONSERVATIVE_SIGMA)),
            moderate=ceil_to_unit(max(0.0, predicted + sigma * MODERATE_SIGMA)),
            aggressive=ceil_to_unit(max(0.0, predicted + sigma * AGGRESSIVE_SIGMA)),
            ai_optimized=ceil_to_unit(predicted),
        )

        if confidence in HIGH_CONFIDENCE:
            recommended = BudgetStrategy.AI_OPTIMIZED
        elif cv > VOLATILE_CATEGORY_CV:
            recommended = BudgetStrategy.CONSERVATIVE
        else:
            recommended = BudgetStrategy.MODERATE

        trend_rate = slope / average * 100
        name = first.display_category
        patterns = self._patterns(series / average, slope / average, cv)
        insights = self._insights(name, confidence, trend_rate, patterns)

        return SmartBudgetSuggestion(
            category_id=first.category_key,
            category_name=name,
            prediction=SpendPrediction(
                amount=to_money(predicted),
                confidence=confidence,
                methods=PredictionMethods(
                    linear_regression=to_money(linear),
                    exponential_moving_average=to_money(ema),
                    weighted_average=to_money(weighted),
                    ensemble=to_money(ensemble),
                ),
                seasonality_factor=round(factor, 4),
            ),
            strategies=strategies,
            recommended_strategy=recommended,
            analysis=MonthlySeriesAnalysis(
                months_analyzed=len(values),
                average_monthly=to_money(average),
                standard_deviation=to_money(sigma),
                volatility=round(cv, 2),
                trend=statistics.classify_delta(trend_rate),
                trend_rate=round(trend_rate, 2),
            ),
            patterns=patterns,
            insights=insights,
        )

    @staticmethod
    def _patterns(factors: pd.Series, growth_rate: float, cv: float) -> List[SpendingPatternNote]:
        patterns = []
        if growth_rate > GROWTH_PATTERN_RATE:
            patterns.append(SpendingPatternNote(
                type=PatternFlag.GROWTH,
                description="Spending is rising consistently",
                impact=Severity.HIGH,
            ))
        if cv > VOLATILE_CATEGORY_CV:
            patterns.append(SpendingPatternNote(
                type=PatternFlag.VOLATILE,
                description="Spending is highly irregular",
                impact=Severity.MEDIUM,
            ))
        if float(factors.max()) > SEASONAL_SPREAD_RATIO * float(factors.min()):
            patterns.append(SpendingPatternNote(
                type=PatternFlag.SEASONAL,
                description="Spending follows a seasonal pattern",
                impact=Severity.MEDIUM,
            ))
        return patterns

    @staticmethod
    def _insights(
        name: str,
        confidence: PredictionConfidence,
        trend_rate: float,
        patterns: List[SpendingPatternNote]
    ) -> List[CategoryInsight]:
        insights = []
        if confidence in HIGH_CONFIDENCE:
            insights.append(CategoryInsight(
                kind=AdvisoryKind.INFO,
                message=f"{name} spending is very predictable. Use the AI-optimized budget.",
                action="use_ai_optimized",
            ))
        if trend_rate > 0:
            insights.append(CategoryInsight(
                kind=AdvisoryKind.WARNING,
                message=f"{name} spending grows {trend_rate:.1f}% per month.",
                action="review_spending",
            ))
        if any(p.type == PatternFlag.VOLATILE for p in patterns):
            insights.append(CategoryInsight(
                kind=AdvisoryKind.WARNING,
                message=f"{name} spending is irregular. Use the conservative budget.",
                action="use_conservative",
            ))
        return insights

    @staticmethod
    def _portfolio(suggestions: List[SmartBudgetSuggestion], average_income: float) -> PortfolioAnalysis:
        comparison = []
        for strategy in BudgetStrategy:
            total = sum((s.strategies.amount(strategy) for s in suggestions), to_money(0))
            rate = (average_income - float(total)) / average_income * 100 if average_income > 0 else 0.0
            comparison.append(StrategyTotal(strategy=strategy, total=total, savings_rate=round(rate, 2)))

        ai_total = next(item.total for item in comparison if item.strategy == BudgetStrategy.AI_OPTIMIZED)
        ratio = float(ai_total) / average_income * 100 if average_income > 0 else 0.0
        prefer_ai = average_income > 0 and ratio < AI_OPTIMIZED_MAX_RATIO

        return PortfolioAnalysis(
            total_predicted_spending=sum((s.prediction.amount for s in suggestions), to_money(0)),
            average_monthly_income=to_money(average_income),
            ai_optimized_ratio=round(ratio, 2),
            strategy_comparison=comparison,
            recommended_strategy=BudgetStrategy.AI_OPTIMIZED if prefer_ai else BudgetStrategy.MODERATE,
        )

    @staticmethod
    def _portfolio_notes(
        suggestions: List[SmartBudgetSuggestion],
        portfolio: PortfolioAnalysis
    ) -> List[AdvisoryNote]:
        notes = []
        ratio = portfolio.ai_optimized_ratio
        if portfolio.average_monthly_income > 0 and ratio < HIGH_SAVINGS_POTENTIAL_RATIO:
            potential = portfolio.average_monthly_income - portfolio.strategy(BudgetStrategy.AI_OPTIMIZED).total
            notes.append(AdvisoryNote(
                kind=AdvisoryKind.OPPORTUNITY,
                title="High savings potential",
                message=(
                    f"Predicted expenses need only {ratio:.0f}% of income. "
                    f"Up to {potential} per month could be saved or invested."
                ),
            ))

        confident = sum(1 for s in suggestions if s.prediction.confidence in HIGH_CONFIDENCE)
        notes.append(AdvisoryNote(
            kind=AdvisoryKind.INFO,
            title="Prediction confidence",
            message=f"{confident} of {len(suggestions)} categories have high-confidence predictions.",
        ))
        return notes


def trailing_periods(end_year: int, end_month: int, months: int = SMART_BUDGET_MONTHS) -> pd.PeriodIndex:
    """``months`` consecutive calendar months ending with the given one."""
    return pd.period_range(end=pd.Period(year=end_year, month=end_month, freq="M"), periods=months, freq="M")
