"""
Anomaly detection: outlier expenses, budget breaches and income drops.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import pandas as pd
import structlog

from ..models.analytics import Anomaly, AnomalyType, Severity
from ..models.financial import BudgetRecord, EntryKind, LedgerEntry
from ..utils.constants import (
    BREACH_HIGH_PERCENT,
    BREACH_MEDIUM_PERCENT,
    INCOME_DROP_HIGH_PERCENT,
    INCOME_DROP_MEDIUM_PERCENT,
    INCOME_DROP_RATIO,
    OUTLIER_HIGH_SIGMA,
    OUTLIER_MEDIUM_SIGMA,
    OUTLIER_MIN_ENTRIES,
)
from ..utils.dates import last_completed_month, previous_month
from ..utils.money import to_money
from . import statistics
from .ledger import monthly_category_totals, monthly_totals

logger = structlog.get_logger()


def _graded(percentage: float, high: float, medium: float) -> Severity:
    if percentage > high:
        return Severity.HIGH
    if percentage > medium:
        return Severity.MEDIUM
    return Severity.LOW


class AnomalyDetector:
    """Detects the three anomaly classes independently."""

    def detect(
        self,
        expenses: Sequence[LedgerEntry],
        budgets: Iterable[BudgetRecord],
        year_expenses: Sequence[LedgerEntry],
        income: Sequence[LedgerEntry],
        now: datetime
    ) -> List[Anomaly]:
        """
        Run every detector and collect the results.

        Args:
            expenses: expense entries of the analysis window
            budgets: budget records of the family
            year_expenses: expense entries of the current year
            income: income entries covering at least the last two completed months
            now: reference time

        Returns:
            Unordered list of anomalies
        """
        anomalies = self.find_outliers(expenses)
        anomalies.extend(self.find_budget_breaches(budgets, year_expenses, now.year))
        drop = self.find_income_drop(income, now)
        if drop is not None:
            anomalies.append(drop)
        return anomalies

    def find_outliers(self, expenses: Sequence[LedgerEntry]) -> List[Anomaly]:
        """Flag expenses above mean + 2 sigma (medium) or mean + 3 sigma (high)."""
        expenses = [entry for entry in expenses if entry.kind == EntryKind.EXPENSE]
        if len(expenses) < OUTLIER_MIN_ENTRIES:
            return []

        amounts = [float(entry.amount) for entry in expenses]
        average = statistics.mean(amounts)
        sigma = statistics.stddev(amounts)
        medium_threshold = average + OUTLIER_MEDIUM_SIGMA * sigma
        high_threshold = average + OUTLIER_HIGH_SIGMA * sigma

        anomalies = []
        for entry in expenses:
            amount = float(entry.amount)
            if amount <= medium_threshold:
                continue
            label = entry.description or entry.display_category
            anomalies.append(Anomaly(
                type=AnomalyType.HIGH_SPENDING,
                severity=Severity.HIGH if amount > high_threshold else Severity.MEDIUM,
                description=f"Unusual transaction: {label} of {to_money(amount)}",
                amount=to_money(amount),
                category_id=entry.category_id,
                date=entry.occurred_at,
            ))
        return anomalies

    def find_budget_breaches(
        self,
        budgets: Iterable[BudgetRecord],
        expenses: Sequence[LedgerEntry],
        year: int
    ) -> List[Anomaly]:
        """Compare each budget of ``year`` with the actual spend of its category and month."""
        spent = monthly_category_totals(
            entry for entry in expenses if entry.kind == EntryKind.EXPENSE
        )

        anomalies = []
        for budget in budgets:
            if budget.period_year != year:
                continue

            period = pd.Period(year=budget.period_year, month=budget.period_month, freq="M")
            actual = spent.get((budget.category_id, period), 0.0)
            limit = float(budget.amount)
            if actual <= limit:
                continue

            overage = actual - limit
            percentage = overage / limit * 100 if limit > 0 else 0.0
            name = budget.category_name or budget.category_id
            anomalies.append(Anomaly(
                type=AnomalyType.BUDGET_BREACH,
                severity=_graded(percentage, BREACH_HIGH_PERCENT, BREACH_MEDIUM_PERCENT),
                description=f'Budget for "{name}" in {period} exceeded by {percentage:.1f}%',
                amount=to_money(overage),
                category_id=budget.category_id,
                date=period.start_time.to_pydatetime(),
            ))
        return anomalies

    def find_income_drop(self, income: Sequence[LedgerEntry], now: datetime) -> Optional[Anomaly]:
        """
        Compare income of the last completed month with the month before it.

        Returns None when there is no drop or the prior month had no income.
        """
        year, month = last_completed_month(now)
        prior_year, prior_month = previous_month(year, month)
        current_period = pd.Period(year=year, month=month, freq="M")
        prior_period = pd.Period(year=prior_year, month=prior_month, freq="M")

        totals = monthly_totals(
            [entry for entry in income if entry.kind == EntryKind.INCOME],
            [prior_period, current_period]
        )
        prior = float(totals[prior_period])
        current = float(totals[current_period])

        if prior <= 0 or current >= prior * INCOME_DROP_RATIO:
            return None

        drop = (prior - current) / prior * 100
        logger.info("Income drop detected", period=str(current_period), drop_percent=round(drop, 1))
        return Anomaly(
            type=AnomalyType.INCOME_DROP,
            severity=_graded(drop, INCOME_DROP_HIGH_PERCENT, INCOME_DROP_MEDIUM_PERCENT),
            description=f"Income in {current_period} fell {drop:.1f}% from {prior_period}",
            amount=to_money(prior - current),
            date=current_period.start_time.to_pydatetime(),
        )
