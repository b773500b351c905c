"""
Calendar-month helpers built on pandas offsets and periods.
Timestamps inside the core are naive wall-clock times (see models.base);
month ranges are half-open: [start, next_start).
"""

from datetime import datetime
from typing import Tuple

import pandas as pd


def naive(moment: datetime) -> datetime:
    """Drop timezone information, keeping the wall-clock time."""
    if moment.tzinfo is not None:
        return moment.replace(tzinfo=None)
    return moment


def shift_months(moment: datetime, months: int) -> datetime:
    """Move a timestamp by whole calendar months, clamping the day."""
    return (pd.Timestamp(moment) + pd.DateOffset(months=months)).to_pydatetime()


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Return ``(start, next_month_start)`` for a calendar month."""
    start = datetime(year, month, 1)
    return start, shift_months(start, 1)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    """Return the ``(year, month)`` before the given one."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def last_completed_month(now: datetime) -> Tuple[int, int]:
    """The most recent calendar month that has fully elapsed at ``now``."""
    return previous_month(now.year, now.month)


def midpoint(start: datetime, end: datetime) -> datetime:
    """Elapsed-time midpoint of a window."""
    return start + (end - start) / 2
