"""
Budget recommendations from historical spending variance.
"""
from typing import Dict, Iterable, List, Optional, Sequence

import structlog

from ..models.analytics import (
    AdvisoryKind,
    AdvisoryNote,
    BudgetRecommendationReport,
    BudgetRecommendationSummary,
    CategoryBudgetRecommendation,
    CategorySpendingAnalysis,
    ConfidenceLevel,
    CurrentBudgetComparison,
    TrendDirection,
)
from ..models.financial import AnalysisWindow, BudgetPeriod, BudgetRecord, EntryKind, LedgerEntry
from ..utils.constants import (
    ADVISORY_CATEGORY_LIMIT,
    BUDGET_TOO_HIGH_RATIO,
    BUFFER_DECREASING,
    BUFFER_INCREASING,
    BUFFER_STABLE,
    CONFIDENCE_HIGH_CV,
    CONFIDENCE_MEDIUM_CV,
    MAX_BUDGET_SIGMA,
    SAVINGS_OPPORTUNITY_RATIO,
    VOLATILE_CATEGORY_CV,
)
from ..utils.money import ceil_to_unit, to_money
from . import statistics
from .ledger import filter_entries, group_by_category, total_amount
from .spending_patterns import SpendingPatternAnalyzer

logger = structlog.get_logger()

BUFFER_FACTORS = {
    TrendDirection.INCREASING: BUFFER_INCREASING,
    TrendDirection.DECREASING: BUFFER_DECREASING,
    TrendDirection.STABLE: BUFFER_STABLE,
}

TREND_REASONS = {
    TrendDirection.INCREASING: "Added buffer due to increasing spending.",
    TrendDirection.DECREASING: "Reduced budget due to decreasing spending.",
    TrendDirection.STABLE: "Stable spending pattern with small buffer.",
}


def confidence_from_cv(cv: float) -> ConfidenceLevel:
    """Lower variation means higher confidence."""
    if cv < CONFIDENCE_HIGH_CV:
        return ConfidenceLevel.HIGH
    if cv < CONFIDENCE_MEDIUM_CV:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class BudgetRecommender:
    """Suggests per-category budgets for a target month."""

    def __init__(self, pattern_analyzer: Optional[SpendingPatternAnalyzer] = None):
        self.pattern_analyzer = pattern_analyzer or SpendingPatternAnalyzer()

    def recommend(
        self,
        entries: Sequence[LedgerEntry],
        window: AnalysisWindow,
        target: BudgetPeriod,
        current_budgets: Iterable[BudgetRecord] = ()
    ) -> BudgetRecommendationReport:
        """
        Build recommendations for every category with expenses in the window.

        Args:
            entries: income and expense entries of the family
            window: historical window; ``window.months`` is the averaging denominator
            target: month the recommendations are for
            current_budgets: budgets already set, matched on the target period

        Returns:
            Report with per-category recommendations, family summary and advisory notes
        """
        expenses = filter_entries(entries, window.start, window.end, EntryKind.EXPENSE)
        income = filter_entries(entries, window.start, window.end, EntryKind.INCOME)

        existing: Dict[str, BudgetRecord] = {
            budget.category_id: budget
            for budget in current_budgets
            if budget.period_year == target.year and budget.period_month == target.month
        }

        recommendations = [
            self._recommend_category(category_entries, window, existing.get(key))
            for key, category_entries in group_by_category(expenses).items()
        ]
        recommendations.sort(key=lambda r: (-r.analysis.average_monthly, r.category_name))

        summary = self._summarize(recommendations, total_amount(income) / window.months)
        notes = self._advisory_notes(recommendations, summary)

        logger.info(
            "Budget recommendations generated",
            family_id=window.family_id,
            target_period=target.label,
            categories=len(recommendations),
            notes=len(notes)
        )

        return BudgetRecommendationReport(
            family_id=window.family_id,
            target_year=target.year,
            target_month=target.month,
            months_analyzed=window.months,
            recommendations=recommendations,
            summary=summary,
            notes=notes,
        )

    def _recommend_category(
        self,
        category_entries: List[LedgerEntry],
        window: AnalysisWindow,
        current: Optional[BudgetRecord]
    ) -> CategoryBudgetRecommendation:
        amounts = [float(entry.amount) for entry in category_entries]
        total = sum(amounts)
        average = total / window.months
        sigma = statistics.stddev(amounts)
        cv = statistics.coefficient_of_variation(amounts)
        trend, _ = self.pattern_analyzer.category_trend(category_entries, window)

        raw = max(0.0, average + sigma * BUFFER_FACTORS[trend])
        suggested = ceil_to_unit(raw)
        min_budget = ceil_to_unit(max(0.0, average - sigma))
        max_budget = ceil_to_unit(average + sigma * MAX_BUDGET_SIGMA)

        comparison = None
        if current is not None:
            difference = current.amount - suggested
            percentage = float(difference / suggested * 100) if suggested > 0 else 0.0
            comparison = CurrentBudgetComparison(
                amount=to_money(current.amount),
                difference=to_money(difference),
                difference_percentage=round(percentage, 2),
            )

        first = category_entries[0]
        return CategoryBudgetRecommendation(
            category_id=first.category_key,
            category_name=first.display_category,
            suggested_amount=suggested,
            min_budget=min_budget,
            max_budget=max_budget,
            confidence=confidence_from_cv(cv),
            reasoning=(
                f"Based on {window.months} months of data with {trend.value} trend. "
                f"{TREND_REASONS[trend]}"
            ),
            analysis=CategorySpendingAnalysis(
                average_monthly=to_money(average),
                standard_deviation=to_money(sigma),
                coefficient_of_variation=round(cv, 2),
                trend=trend,
                transaction_count=len(amounts),
                total_spent=to_money(total),
            ),
            current_budget=comparison,
        )

    def _summarize(
        self,
        recommendations: List[CategoryBudgetRecommendation],
        average_income: float
    ) -> BudgetRecommendationSummary:
        total = sum((r.suggested_amount for r in recommendations), to_money(0))
        ratio = float(total) / average_income * 100 if average_income > 0 else 0.0
        return BudgetRecommendationSummary(
            total_recommended_budget=total,
            average_monthly_income=to_money(average_income),
            budget_to_income_ratio=round(ratio, 2),
            recommended_savings_rate=round(100 - ratio, 2) if average_income > 0 else 0.0,
            categories_analyzed=len(recommendations),
        )

    def _advisory_notes(
        self,
        recommendations: List[CategoryBudgetRecommendation],
        summary: BudgetRecommendationSummary
    ) -> List[AdvisoryNote]:
        notes = []
        ratio = summary.budget_to_income_ratio
        if summary.average_monthly_income > 0:
            if ratio > BUDGET_TOO_HIGH_RATIO:
                notes.append(AdvisoryNote(
                    kind=AdvisoryKind.WARNING,
                    title="Budget too high",
                    message=(
                        f"Recommended budgets total {ratio:.0f}% of income. "
                        "Consider cutting non-essential categories."
                    ),
                ))
            elif ratio < SAVINGS_OPPORTUNITY_RATIO:
                notes.append(AdvisoryNote(
                    kind=AdvisoryKind.OPPORTUNITY,
                    title="Savings opportunity",
                    message=(
                        f"Recommended budgets total only {ratio:.0f}% of income. "
                        f"You could save {100 - ratio:.0f}% of income."
                    ),
                ))

        volatile = [r for r in recommendations if r.analysis.coefficient_of_variation > VOLATILE_CATEGORY_CV]
        if volatile:
            names = ", ".join(r.category_name for r in volatile[:ADVISORY_CATEGORY_LIMIT])
            notes.append(AdvisoryNote(
                kind=AdvisoryKind.INFO,
                title="Volatile categories",
                message=f"{len(volatile)} categories have irregular spending. Monitor closely: {names}",
            ))

        increasing = [r for r in recommendations if r.analysis.trend == TrendDirection.INCREASING]
        if increasing:
            names = ", ".join(r.category_name for r in increasing[:ADVISORY_CATEGORY_LIMIT])
            notes.append(AdvisoryNote(
                kind=AdvisoryKind.WARNING,
                title="Spending increasing",
                message=f"{len(increasing)} categories show rising spend. Review: {names}",
            ))

        return notes
