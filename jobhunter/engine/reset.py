"""Reset engine: day/week rollover applied when state is loaded.

Rollover is decided by key *equality*, not ordering. A key that moved in
either direction (including a clock set backward) resets that frequency class.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Union

from jobhunter.engine.calendar_keys import day_key, week_key
from jobhunter.models.state import AppState
from jobhunter.models.task import TaskFrequency, TaskRecord
from jobhunter.models.task_factory import next_task_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetResult:
    """Outcome of one load-time evaluation."""
    state: AppState
    day_changed: bool
    week_changed: bool
    fresh: bool = False


def reconcile(
    persisted_tasks: Sequence[TaskRecord],
    default_seed: Sequence[TaskRecord],
    dismissed: Iterable[int] = (),
) -> List[TaskRecord]:
    """Append every seed task whose id is missing from the persisted set.

    Additive only: user tasks are never removed and persisted order is kept.
    Seed tasks the user explicitly removed (``dismissed``) stay out.
    """
    present = {t.id for t in persisted_tasks}
    skip = set(dismissed)
    merged = list(persisted_tasks)
    for seed in default_seed:
        if seed.id not in present and seed.id not in skip:
            merged.append(seed.reset())
    return merged


def fresh_state(
    default_seed: Sequence[TaskRecord],
    now: Optional[Union[date, datetime]] = None,
) -> AppState:
    """Build a seeded state: default tasks at zero, empty history, today's keys."""
    tasks = [t.reset() for t in default_seed]
    return AppState(
        tasks=tasks,
        history={},
        last_date=day_key(now),
        last_week=week_key(now),
        next_id=next_task_id(tasks),
        dismissed_defaults=[],
    )


def _reset_task(task: TaskRecord, day_changed: bool, week_changed: bool) -> TaskRecord:
    if task.frequency == TaskFrequency.DAILY and day_changed:
        return task.reset()
    if task.frequency == TaskFrequency.WEEKLY and week_changed:
        return task.reset()
    return task


def apply_reset(
    persisted: AppState,
    default_seed: Sequence[TaskRecord],
    now: Optional[Union[date, datetime]] = None,
) -> ResetResult:
    """Zero completion counts whose period boundary has elapsed.

    A missing ``last_date``/``last_week`` means "unknown" and counts as
    changed. History is carried over untouched.
    """
    today_key = day_key(now)
    today_week = week_key(now)

    day_changed = persisted.last_date is None or persisted.last_date != today_key
    week_changed = persisted.last_week is None or persisted.last_week != today_week

    base = persisted.tasks if persisted.tasks is not None else [t.reset() for t in default_seed]
    tasks = [_reset_task(t, day_changed, week_changed) for t in base]
    tasks = reconcile(tasks, default_seed, persisted.dismissed_defaults)

    if day_changed or week_changed:
        logger.info(
            f"Rollover at {today_key}: day_changed={day_changed} week_changed={week_changed} "
            f"(was {persisted.last_date}/{persisted.last_week})"
        )

    state = AppState(
        tasks=tasks,
        history=dict(persisted.history),
        last_date=today_key,
        last_week=today_week,
        next_id=next_task_id(tasks, persisted.next_id, persisted.dismissed_defaults),
        dismissed_defaults=list(persisted.dismissed_defaults),
    )
    return ResetResult(state=state, day_changed=day_changed, week_changed=week_changed)


def initialize_state(
    persisted: Optional[AppState],
    default_seed: Sequence[TaskRecord],
    now: Optional[Union[date, datetime]] = None,
) -> ResetResult:
    """Entry point on load: fresh state when nothing usable was persisted."""
    if persisted is None:
        return ResetResult(
            state=fresh_state(default_seed, now),
            day_changed=False,
            week_changed=False,
            fresh=True,
        )
    return apply_reset(persisted, default_seed, now)
