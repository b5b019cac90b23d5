"""Tracker engine for jobhunter."""

from jobhunter.engine.calendar_keys import day_key, week_key
from jobhunter.engine.reset import reconcile, apply_reset, initialize_state, fresh_state, ResetResult
from jobhunter.engine.progress import toggle_task, increment_task, decrement_task, recompute_today_snapshot
from jobhunter.engine.streak import compute_streak, history_window

__all__ = [
    "day_key",
    "week_key",
    "reconcile",
    "apply_reset",
    "initialize_state",
    "fresh_state",
    "ResetResult",
    "toggle_task",
    "increment_task",
    "decrement_task",
    "recompute_today_snapshot",
    "compute_streak",
    "history_window",
]
