"""Streak calculation and the 7-day history window."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Mapping, Optional, Union

from jobhunter.engine.calendar_keys import local_date
from jobhunter.models.constants import HISTORY_WINDOW_DAYS
from jobhunter.models.history import DayProgress, HistoryEntry

_WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def compute_streak(history: Mapping[str, HistoryEntry], today: Optional[Union[date, datetime]] = None) -> int:
    """Count consecutive goal-met days walking backward from today.

    The walk stops at the first day with no entry or with ``goal_met`` false,
    so an unevaluated today yields 0.
    """
    d = local_date(today)
    streak = 0
    while True:
        entry = history.get(d.isoformat())
        if entry is None or not entry.goal_met:
            break
        streak += 1
        d = d - timedelta(days=1)
    return streak


def streak_label(streak: int) -> str:
    return f"{streak} day{'' if streak == 1 else 's'}"


def _percent(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half rounds up, matching what the browser showed
    return int((completed * 100 / total) + 0.5)


def _day_label(d: date) -> str:
    return f"{_WEEKDAY_ABBR[d.weekday()]} {d.month}/{d.day}"


def history_window(
    history: Mapping[str, HistoryEntry],
    today: Optional[Union[date, datetime]] = None,
    days: int = HISTORY_WINDOW_DAYS,
) -> List[DayProgress]:
    """Project the ledger onto the last ``days`` calendar days, oldest first.

    Days with no entry show as 0/0 and 0%. Read-only.
    """
    end = local_date(today)
    rows: List[DayProgress] = []
    for offset in range(days - 1, -1, -1):
        d = end - timedelta(days=offset)
        key = d.isoformat()
        entry = history.get(key)
        completed, total = entry.counts() if entry is not None else (0, 0)
        rows.append(
            DayProgress(
                key=key,
                label=_day_label(d),
                completed=completed,
                total=total,
                percent=_percent(completed, total),
            )
        )
    return rows
