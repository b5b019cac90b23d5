"""Task progress mutations and today's history snapshot."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence, Union

from jobhunter.engine.calendar_keys import day_key
from jobhunter.exceptions import TaskNotFoundError
from jobhunter.models.history import HistoryEntry
from jobhunter.models.state import AppState
from jobhunter.models.task import TaskRecord

logger = logging.getLogger(__name__)


def toggle_count(task: TaskRecord) -> int:
    """Binary completion: done goes to 0, anything else goes to target."""
    return 0 if task.completed_count >= task.target else task.target


def increment_count(task: TaskRecord) -> int:
    return min(task.completed_count + 1, task.target)


def decrement_count(task: TaskRecord) -> int:
    return max(task.completed_count - 1, 0)


def recompute_today_snapshot(tasks: Sequence[TaskRecord], today_key: str) -> tuple[str, HistoryEntry]:
    """Build the history entry for ``today_key`` from the current tasks.

    Every task counts toward today's entry, weekly ones included, so a weekly
    task finished earlier in the week keeps today's goal reachable.
    """
    completed = sum(1 for t in tasks if t.completed_count >= t.target)
    return today_key, HistoryEntry.from_counts(completed, len(tasks))


def _mutate(
    state: AppState,
    task_id: int,
    compute: Callable[[TaskRecord], int],
    now: Optional[Union[date, datetime]] = None,
) -> AppState:
    tasks = state.task_list()
    updated: List[TaskRecord] = []
    found = False
    for task in tasks:
        if task.id == task_id:
            found = True
            updated.append(task.with_count(compute(task)))
        else:
            updated.append(task)
    if not found:
        raise TaskNotFoundError(task_id)

    key, entry = recompute_today_snapshot(updated, day_key(now))
    history = dict(state.history)
    history[key] = entry
    logger.debug(f"Task {task_id} updated; {key} now {entry.completed_count}/{entry.total}")
    return state.model_copy(update={"tasks": updated, "history": history})


def toggle_task(state: AppState, task_id: int, now: Optional[Union[date, datetime]] = None) -> AppState:
    """Return a new state with the task toggled and today's snapshot rewritten."""
    return _mutate(state, task_id, toggle_count, now)


def increment_task(state: AppState, task_id: int, now: Optional[Union[date, datetime]] = None) -> AppState:
    return _mutate(state, task_id, increment_count, now)


def decrement_task(state: AppState, task_id: int, now: Optional[Union[date, datetime]] = None) -> AppState:
    return _mutate(state, task_id, decrement_count, now)


def completed_today(tasks: Sequence[TaskRecord]) -> int:
    return sum(1 for t in tasks if t.is_done)
