"""
Personalised recommendations and savings opportunities.
"""
from datetime import datetime
from typing import Iterable, List, Sequence

import structlog

from ..models.analytics import (
    InsightRecommendation,
    InsightsReport,
    InsightType,
    Priority,
    SavingsOpportunity,
    SpendingPattern,
    TrendDirection,
)
from ..models.financial import (
    AnalysisWindow,
    BudgetRecord,
    EntryKind,
    GoalProgress,
    LedgerEntry,
    WalletBalance,
)
from ..utils.constants import (
    GOAL_LAGGING_PROGRESS_PERCENT,
    GOAL_URGENCY_DAYS,
    MIN_EMERGENCY_FUND_MONTHS,
    MONTHS_PER_YEAR,
    REDUCTION_DEFAULT_PERCENT,
    REDUCTION_INCREASING_PERCENT,
    SAVINGS_OPPORTUNITY_LIMIT,
    SAVINGS_OPPORTUNITY_MIN_AVERAGE,
    SEVERE_TREND_PERCENT,
    STRONG_TREND_PERCENT,
    TARGET_SAVINGS_RATE_PERCENT,
    UNBUDGETED_MIN_AVERAGE,
)
from ..utils.dates import naive
from ..utils.money import to_money
from .health_score import emergency_fund_months, savings_rate
from .ledger import filter_entries, total_amount

logger = structlog.get_logger()


class InsightsComposer:
    """Turns window data and spending patterns into actionable advice."""

    def compose(
        self,
        window: AnalysisWindow,
        entries: Sequence[LedgerEntry],
        patterns: Sequence[SpendingPattern],
        budgets: Iterable[BudgetRecord],
        wallets: Iterable[WalletBalance],
        goals: Iterable[GoalProgress],
        now: datetime
    ) -> InsightsReport:
        income = total_amount(filter_entries(entries, window.start, window.end, EntryKind.INCOME))
        expense = total_amount(filter_entries(entries, window.start, window.end, EntryKind.EXPENSE))
        rate = savings_rate(income, expense)
        monthly_expense = expense / window.months
        balance = sum(float(wallet.balance) for wallet in wallets)
        fund_months = emergency_fund_months(balance, monthly_expense)

        recommendations: List[InsightRecommendation] = []
        if rate < TARGET_SAVINGS_RATE_PERCENT:
            recommendations.append(InsightRecommendation(
                type=InsightType.SAVINGS,
                priority=Priority.HIGH,
                title="Increase your savings rate",
                description=(
                    f"Your savings rate is {rate:.1f}%. "
                    f"At least {TARGET_SAVINGS_RATE_PERCENT:.0f}% is recommended."
                ),
                action="Reduce discretionary spending or increase income.",
                impact="Builds a buffer for goals and emergencies.",
            ))

        recommendations.extend(self._trend_recommendations(patterns))

        unbudgeted = self._unbudgeted(patterns, budgets)
        if unbudgeted:
            recommendations.append(InsightRecommendation(
                type=InsightType.BUDGET,
                priority=Priority.MEDIUM,
                title="Set budgets for significant categories",
                description=(
                    f"{len(unbudgeted)} categories with significant spending have no budget: "
                    f"{', '.join(p.category_name for p in unbudgeted)}."
                ),
                action="Create monthly budgets for these categories.",
                impact="Better control over recurring spend.",
            ))

        if monthly_expense > 0 and fund_months < MIN_EMERGENCY_FUND_MONTHS:
            target = monthly_expense * MIN_EMERGENCY_FUND_MONTHS
            recommendations.append(InsightRecommendation(
                type=InsightType.EMERGENCY_FUND,
                priority=Priority.HIGH,
                title="Emergency fund is low",
                description=(
                    f"Your balances cover {fund_months:.1f} months of expenses. "
                    f"Aim for 3 to 6 months ({to_money(target)})."
                ),
                action=f"Set aside {to_money(target - balance)} to reach three months of coverage.",
                impact="Protects against income loss and unexpected costs.",
            ))

        recommendations.extend(self._goal_recommendations(goals, now))
        recommendations.sort(key=lambda r: -r.priority.weight)

        opportunities = self._savings_opportunities(patterns)
        total_savings = sum((o.potential_monthly_savings for o in opportunities), to_money(0))

        logger.info(
            "Insights generated",
            family_id=window.family_id,
            recommendations=len(recommendations),
            opportunities=len(opportunities)
        )

        return InsightsReport(
            family_id=window.family_id,
            generated_at=naive(now),
            savings_rate=round(rate, 2),
            emergency_fund_months=round(fund_months, 2),
            recommendations=recommendations,
            savings_opportunities=opportunities,
            total_potential_monthly_savings=total_savings,
        )

    def _trend_recommendations(self, patterns: Sequence[SpendingPattern]) -> List[InsightRecommendation]:
        return [
            InsightRecommendation(
                type=InsightType.SPENDING,
                priority=Priority.HIGH if p.trend_percentage > SEVERE_TREND_PERCENT else Priority.MEDIUM,
                title=f"{p.category_name} spending is rising",
                description=f"Spending on {p.category_name} increased {p.trend_percentage:.1f}%.",
                action="Review recent transactions and identify the cause.",
                impact=f"Current monthly average is {p.monthly_average}.",
            )
            for p in patterns
            if p.trend == TrendDirection.INCREASING and p.trend_percentage > STRONG_TREND_PERCENT
        ]

    def _unbudgeted(
        self,
        patterns: Sequence[SpendingPattern],
        budgets: Iterable[BudgetRecord]
    ) -> List[SpendingPattern]:
        budgeted = {budget.category_id for budget in budgets}
        return [
            p for p in patterns
            if p.category_id not in budgeted and p.average_amount > UNBUDGETED_MIN_AVERAGE
        ]

    def _goal_recommendations(self, goals: Iterable[GoalProgress], now: datetime) -> List[InsightRecommendation]:
        now = naive(now)
        recommendations = []
        for goal in goals:
            if not goal.is_active or goal.deadline is None:
                continue

            days_left = (goal.deadline - now).days
            progress = goal.progress_percent
            if not (0 < days_left < GOAL_URGENCY_DAYS and progress < GOAL_LAGGING_PROGRESS_PERCENT):
                continue

            remaining = float(goal.target_amount - goal.contributed_amount)
            required_monthly = remaining / (days_left / 30)
            recommendations.append(InsightRecommendation(
                type=InsightType.GOALS,
                priority=Priority.MEDIUM,
                title=f"Accelerate goal: {goal.name}",
                description=(
                    f'"{goal.name}" is due in {days_left} days but only {progress:.1f}% funded.'
                ),
                action=f"Contribute {to_money(required_monthly)} per month.",
                impact="Keeps the goal on schedule.",
            ))
        return recommendations

    def _savings_opportunities(self, patterns: Sequence[SpendingPattern]) -> List[SavingsOpportunity]:
        candidates = [p for p in patterns if p.average_amount > SAVINGS_OPPORTUNITY_MIN_AVERAGE]
        opportunities = []
        for p in candidates[:SAVINGS_OPPORTUNITY_LIMIT]:
            reduction = (
                REDUCTION_INCREASING_PERCENT
                if p.trend == TrendDirection.INCREASING
                else REDUCTION_DEFAULT_PERCENT
            )
            monthly = float(p.monthly_average) * reduction / 100
            opportunities.append(SavingsOpportunity(
                category_id=p.category_id,
                category_name=p.category_name,
                current_monthly_average=p.monthly_average,
                suggested_reduction_percent=reduction,
                potential_monthly_savings=to_money(monthly),
                potential_annual_savings=to_money(monthly * MONTHS_PER_YEAR),
                trend=p.trend,
            ))
        return opportunities
