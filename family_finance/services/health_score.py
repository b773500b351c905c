"""
Composite financial health score.
"""
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence, Tuple

import structlog

from ..models.analytics import HealthComponent, HealthRating, HealthScoreBreakdown
from ..models.financial import BudgetRecord, GoalProgress, WalletBalance
from ..utils.constants import (
    BUDGET_ADHERENCE_CAP,
    EMERGENCY_FUND_CAP,
    EMERGENCY_FUND_TARGET_MONTHS,
    GOAL_PROGRESS_CAP,
    HEALTH_EXCELLENT,
    HEALTH_FAIR,
    HEALTH_GOOD,
    SAVINGS_RATE_CAP,
    SAVINGS_RATE_TARGET_PERCENT,
)

logger = structlog.get_logger()


def savings_rate(income: float, expense: float) -> float:
    """Share of income not spent, in percent; 0 without income."""
    if income <= 0:
        return 0.0
    return (income - expense) / income * 100


def emergency_fund_months(balance: float, average_monthly_expense: float) -> float:
    """Months of expenses covered by wallet balances; 0 without expenses."""
    if average_monthly_expense <= 0:
        return 0.0
    return balance / average_monthly_expense


def rating_for(total: int) -> HealthRating:
    if total >= HEALTH_EXCELLENT:
        return HealthRating.EXCELLENT
    if total >= HEALTH_GOOD:
        return HealthRating.GOOD
    if total >= HEALTH_FAIR:
        return HealthRating.FAIR
    return HealthRating.NEEDS_IMPROVEMENT


def _capped(value: float, cap: int) -> float:
    return min(float(cap), max(0.0, value))


def _round_half_up(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def allocate_scores(raw_scores: Sequence[float], total: int) -> List[int]:
    """
    Split an integer total across components in proportion to their raw scores.

    Every component gets the floor of its raw score; the units still missing
    from ``total`` go to the components with the largest fractional parts.
    """
    floors = [math.floor(score) for score in raw_scores]
    missing = total - sum(floors)
    by_fraction = sorted(
        range(len(raw_scores)),
        key=lambda i: (-(raw_scores[i] - floors[i]), i)
    )
    for index in by_fraction[:max(0, missing)]:
        floors[index] += 1
    return floors


class HealthScoreCalculator:
    """Scores savings rate, budgets, emergency fund and goal progress."""

    def calculate(
        self,
        income_total: float,
        expense_total: float,
        months: int,
        budgets: Iterable[BudgetRecord],
        wallets: Iterable[WalletBalance],
        goals: Iterable[GoalProgress]
    ) -> HealthScoreBreakdown:
        """
        Compute the composite score.

        Args:
            income_total: income over the window
            expense_total: expenses over the window
            months: months in the window, used to average expenses
            budgets: budget records of the family
            wallets: current wallet balances
            goals: savings goals; inactive goals are ignored

        Returns:
            Total, rating and per-component breakdown
        """
        components = [
            self._savings_component(income_total, expense_total),
            self._budget_component(budgets),
            self._emergency_component(wallets, expense_total / months if months else 0.0),
            self._goal_component(goals),
        ]

        raw_scores = [raw for _, raw, _, _ in components]
        total = _round_half_up(sum(raw_scores))
        scores = allocate_scores(raw_scores, total)

        breakdown = HealthScoreBreakdown(
            total=total,
            rating=rating_for(total),
            components=[
                HealthComponent(
                    name=name,
                    raw_score=round(raw, 4),
                    score=score,
                    max_score=cap,
                    description=description,
                )
                for (name, raw, cap, description), score in zip(components, scores)
            ],
        )
        logger.debug("Health score calculated", total=total, rating=breakdown.rating.value)
        return breakdown

    def _savings_component(self, income: float, expense: float) -> Tuple[str, float, int, str]:
        rate = savings_rate(income, expense)
        raw = _capped(rate / SAVINGS_RATE_TARGET_PERCENT * SAVINGS_RATE_CAP, SAVINGS_RATE_CAP)
        return "savings_rate", raw, SAVINGS_RATE_CAP, f"Savings rate: {rate:.1f}%"

    def _budget_component(self, budgets: Iterable[BudgetRecord]) -> Tuple[str, float, int, str]:
        active = sum(1 for budget in budgets if budget.is_active)
        raw = float(BUDGET_ADHERENCE_CAP) if active > 0 else 0.0
        return "budget_adherence", raw, BUDGET_ADHERENCE_CAP, f"{active} active budgets"

    def _emergency_component(
        self,
        wallets: Iterable[WalletBalance],
        average_monthly_expense: float
    ) -> Tuple[str, float, int, str]:
        balance = sum(float(wallet.balance) for wallet in wallets)
        months = emergency_fund_months(balance, average_monthly_expense)
        raw = _capped(months / EMERGENCY_FUND_TARGET_MONTHS * EMERGENCY_FUND_CAP, EMERGENCY_FUND_CAP)
        return "emergency_fund", raw, EMERGENCY_FUND_CAP, f"{months:.1f} months of expenses"

    def _goal_component(self, goals: Iterable[GoalProgress]) -> Tuple[str, float, int, str]:
        active = [goal for goal in goals if goal.is_active]
        average_progress = (
            sum(goal.progress_percent for goal in active) / len(active) if active else 0.0
        )
        raw = _capped(average_progress / 100 * GOAL_PROGRESS_CAP, GOAL_PROGRESS_CAP)
        return (
            "goal_progress",
            raw,
            GOAL_PROGRESS_CAP,
            f"{len(active)} active goals, {average_progress:.1f}% avg progress"
        )
