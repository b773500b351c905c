"""
Ledger preprocessing: filtering and monthly bucketing of ledger entries.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from ..models.financial import EntryKind, LedgerEntry

_FRAME_COLUMNS = ["id", "kind", "amount", "occurred_at", "category_key", "category_name"]


def ledger_frame(entries: Iterable[LedgerEntry]) -> pd.DataFrame:
    """Build a DataFrame with one row per entry and float amounts."""
    rows = [
        {
            "id": entry.id,
            "kind": entry.kind.value,
            "amount": float(entry.amount),
            "occurred_at": entry.occurred_at,
            "category_key": entry.category_key,
            "category_name": entry.display_category,
        }
        for entry in entries
    ]
    if not rows:
        return pd.DataFrame(columns=_FRAME_COLUMNS)

    df = pd.DataFrame(rows, columns=_FRAME_COLUMNS)
    df["occurred_at"] = pd.to_datetime(df["occurred_at"])
    df["amount"] = pd.to_numeric(df["amount"])
    return df


def filter_entries(
    entries: Iterable[LedgerEntry],
    start: datetime,
    end: datetime,
    kind: Optional[EntryKind] = None,
) -> List[LedgerEntry]:
    """Entries with ``start <= occurred_at <= end``, optionally of one kind."""
    return [
        entry for entry in entries
        if start <= entry.occurred_at <= end and (kind is None or entry.kind == kind)
    ]


def monthly_totals(entries: Iterable[LedgerEntry], periods: Sequence[pd.Period]) -> pd.Series:
    """
    Sum amounts per calendar month.

    The result is indexed by ``periods``; months without entries are 0.
    """
    index = pd.PeriodIndex(list(periods), freq="M")
    df = ledger_frame(entries)
    if df.empty:
        return pd.Series(0.0, index=index)

    totals = df.groupby(df["occurred_at"].dt.to_period("M"))["amount"].sum()
    return totals.reindex(index, fill_value=0.0).astype(float)


def monthly_category_totals(entries: Iterable[LedgerEntry]) -> Dict[Tuple[str, pd.Period], float]:
    """Sum amounts per ``(category_key, month)``."""
    df = ledger_frame(entries)
    if df.empty:
        return {}

    grouped = df.groupby(["category_key", df["occurred_at"].dt.to_period("M")])["amount"].sum()
    return {(category, period): float(total) for (category, period), total in grouped.items()}


def group_by_category(entries: Iterable[LedgerEntry]) -> Dict[str, List[LedgerEntry]]:
    """Group entries by category key, preserving chronological order."""
    groups: Dict[str, List[LedgerEntry]] = {}
    for entry in sorted(entries, key=lambda e: (e.occurred_at, e.id)):
        groups.setdefault(entry.category_key, []).append(entry)
    return groups


def total_amount(entries: Iterable[LedgerEntry]) -> float:
    """Sum of entry amounts as a float."""
    return float(sum(float(entry.amount) for entry in entries))
