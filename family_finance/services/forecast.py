"""
Next-month income and expense forecast.

This is trailing-window extrapolation, not a regression model: the monthly
average is scaled by the change between the oldest and the most recent
months of the window.
"""
from typing import Optional, Sequence

import pandas as pd
import structlog

from ..models.analytics import ConfidenceLevel, NextMonthForecast
from ..models.financial import AnalysisWindow, EntryKind, LedgerEntry
from ..utils.constants import FORECAST_MEDIUM_CONFIDENCE_MONTHS
from ..utils.exceptions import ValidationError
from ..utils.money import to_money
from . import statistics
from .ledger import monthly_totals

logger = structlog.get_logger()


def default_split(months: int) -> int:
    """Half the window, at least one month."""
    return max(1, months // 2)


class ForecastEngine:
    """Projects next month's income, expense and savings."""

    def forecast(
        self,
        entries: Sequence[LedgerEntry],
        window: AnalysisWindow,
        split_months: Optional[int] = None
    ) -> NextMonthForecast:
        """
        Forecast the month after the window.

        Args:
            entries: ledger entries of the family
            window: the last ``window.months`` calendar months up to the month
                of ``window.end`` are analysed
            split_months: months in each of the recent and older segments;
                defaults to half the window

        Returns:
            Predicted income, expense and savings with the underlying trends
        """
        if split_months is not None and split_months < 1:
            raise ValidationError(
                message="Split months must be at least 1",
                details=[f"split_months: {split_months}"]
            )

        months = window.months
        split = min(split_months or default_split(months), months)
        periods = list(pd.period_range(end=pd.Period(window.end, freq="M"), periods=months, freq="M"))

        income = monthly_totals([e for e in entries if e.kind == EntryKind.INCOME], periods)
        expense = monthly_totals([e for e in entries if e.kind == EntryKind.EXPENSE], periods)

        income_avg, income_trend = self._project(income, split)
        expense_avg, expense_trend = self._project(expense, split)
        predicted_income = income_avg * (1 + income_trend / 100)
        predicted_expense = expense_avg * (1 + expense_trend / 100)

        confidence = (
            ConfidenceLevel.MEDIUM
            if months >= FORECAST_MEDIUM_CONFIDENCE_MONTHS
            else ConfidenceLevel.LOW
        )

        logger.debug(
            "Forecast computed",
            family_id=window.family_id,
            months=months,
            split_months=split,
            income_trend=round(income_trend, 2),
            expense_trend=round(expense_trend, 2)
        )

        return NextMonthForecast(
            predicted_income=to_money(predicted_income),
            predicted_expense=to_money(predicted_expense),
            predicted_savings=to_money(predicted_income - predicted_expense),
            confidence=confidence,
            months_analyzed=months,
            split_months=split,
            average_income=to_money(income_avg),
            average_expense=to_money(expense_avg),
            income_trend_percentage=round(income_trend, 2),
            expense_trend_percentage=round(expense_trend, 2),
            income_trend=statistics.classify_delta(income_trend),
            expense_trend=statistics.classify_delta(expense_trend),
        )

    def _project(self, series: pd.Series, split: int):
        values = series.tolist()
        older = statistics.mean(values[:split])
        recent = statistics.mean(values[-split:])
        return statistics.mean(values), statistics.trend_percentage(older, recent)
