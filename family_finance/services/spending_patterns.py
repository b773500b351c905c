"""
Spending pattern analysis per expense category.
"""
from typing import Iterable, List, Sequence, Tuple

import structlog

from ..models.analytics import SpendingPattern, TrendDirection
from ..models.financial import AnalysisWindow, EntryKind, LedgerEntry
from ..utils.dates import midpoint
from ..utils.money import to_money
from . import statistics
from .ledger import filter_entries, group_by_category

logger = structlog.get_logger()


class SpendingPatternAnalyzer:
    """Aggregates expense entries of a window into per-category patterns."""

    def analyze(self, entries: Iterable[LedgerEntry], window: AnalysisWindow) -> List[SpendingPattern]:
        """
        Build one pattern per category that has expenses in the window.

        Args:
            entries: ledger entries of the family; non-expense entries and
                entries outside the window are ignored
            window: analysis window

        Returns:
            Patterns sorted by average amount, highest first
        """
        expenses = filter_entries(entries, window.start, window.end, EntryKind.EXPENSE)
        patterns = [
            self._build_pattern(category_entries, window)
            for category_entries in group_by_category(expenses).values()
        ]
        patterns.sort(key=lambda p: (-p.average_amount, p.category_name))

        logger.debug(
            "Spending patterns analysed",
            family_id=window.family_id,
            entries=len(expenses),
            categories=len(patterns)
        )
        return patterns

    def category_trend(
        self,
        category_entries: Sequence[LedgerEntry],
        window: AnalysisWindow
    ) -> Tuple[TrendDirection, float]:
        """Trend of one category, comparing the halves of the window by elapsed time."""
        if len(category_entries) < 2:
            return TrendDirection.STABLE, 0.0

        split_at = midpoint(window.start, window.end)
        first, second = statistics.half_split_totals(
            [(entry.occurred_at, entry.amount) for entry in category_entries],
            split_at
        )
        return statistics.classify_trend(first, second)

    def _build_pattern(self, category_entries: List[LedgerEntry], window: AnalysisWindow) -> SpendingPattern:
        amounts = [float(entry.amount) for entry in category_entries]
        total = sum(amounts)
        trend, trend_pct = self.category_trend(category_entries, window)
        first = category_entries[0]

        return SpendingPattern(
            category_id=first.category_key,
            category_name=first.display_category,
            average_amount=to_money(statistics.mean(amounts)),
            monthly_average=to_money(total / window.months),
            frequency=len(amounts),
            total_amount=to_money(total),
            median_amount=to_money(statistics.lower_median(amounts)),
            standard_deviation=to_money(statistics.stddev(amounts)),
            trend=trend,
            trend_percentage=round(trend_pct, 2),
        )
