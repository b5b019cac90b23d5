"""Tracker session: the single owner of the in-memory state.

Every mutation replaces the in-memory state first and then overwrites the
persisted blob, so a write never runs ahead of the state it describes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from jobhunter.database.state_repository import StateRepository
from jobhunter.engine.calendar_keys import day_key
from jobhunter.engine.progress import completed_today, decrement_task, increment_task, toggle_task
from jobhunter.engine.reset import ResetResult, fresh_state, initialize_state, reconcile
from jobhunter.engine.streak import compute_streak, history_window, streak_label
from jobhunter.exceptions import InvalidTaskError, TaskNotFoundError
from jobhunter.models.constants import DEFAULT_TASKS
from jobhunter.models.history import ProgressSummary
from jobhunter.models.state import AppState, Settings
from jobhunter.models.task import TaskFrequency, TaskRecord, View, clamp_count
from jobhunter.models.task_factory import create_task, ensure_https, next_task_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TrackerSession:
    """Loads, mutates and persists the tracker state.

    Use :meth:`load` rather than the constructor; it runs the reset engine
    against the persisted snapshot before anything else can read it.
    """

    def __init__(
        self,
        repository: StateRepository,
        state: AppState,
        default_seed: Sequence[TaskRecord] = DEFAULT_TASKS,
        clock: Clock = datetime.now,
    ):
        self.repository = repository
        self.default_seed = tuple(default_seed)
        self.clock = clock
        self._state = state

    @classmethod
    def load(
        cls,
        repository: StateRepository,
        default_seed: Sequence[TaskRecord] = DEFAULT_TASKS,
        clock: Clock = datetime.now,
    ) -> "TrackerSession":
        """Rehydrate from storage, apply rollover, and persist the new keys."""
        result: ResetResult = initialize_state(repository.load_state(), default_seed, clock())
        if result.fresh:
            logger.info("No usable saved state; starting from defaults")
        session = cls(repository, result.state, default_seed, clock)
        session._commit(result.state)
        return session

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def tasks(self) -> List[TaskRecord]:
        return self._state.task_list()

    def _commit(self, new_state: AppState) -> AppState:
        self._state = new_state
        self.repository.save_state(new_state)
        return new_state

    def _find(self, task_id: int) -> TaskRecord:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(task_id)

    # ---- progress ----

    def toggle(self, task_id: int) -> TaskRecord:
        self._commit(toggle_task(self._state, task_id, self.clock()))
        return self._find(task_id)

    def increment(self, task_id: int) -> TaskRecord:
        self._commit(increment_task(self._state, task_id, self.clock()))
        return self._find(task_id)

    def decrement(self, task_id: int) -> TaskRecord:
        self._commit(decrement_task(self._state, task_id, self.clock()))
        return self._find(task_id)

    def progress(self) -> ProgressSummary:
        now = self.clock()
        tasks = self.tasks
        streak = compute_streak(self._state.history, now)
        return ProgressSummary(
            day_key=day_key(now),
            completed=completed_today(tasks),
            total=len(tasks),
            streak=streak,
            streak_label=streak_label(streak),
            history=history_window(self._state.history, now),
        )

    # ---- task management ----

    def add_task(
        self,
        label: str,
        target: int = 1,
        frequency: TaskFrequency = TaskFrequency.DAILY,
        linked_view: Optional[View] = None,
        external_url: Optional[str] = None,
    ) -> TaskRecord:
        """Append a new user task at the end of the list."""
        tasks = self.tasks
        task_id = next_task_id(tasks, self._state.next_id, self._reserved_ids())
        try:
            task = create_task(task_id, label, target, frequency, linked_view, external_url)
        except ValueError as e:
            raise InvalidTaskError(str(e)) from e
        tasks.append(task)
        self._commit(self._state.model_copy(update={"tasks": tasks, "next_id": task_id + 1}))
        logger.debug(f"Added task {task_id}: {task.label[:50]}")
        return task

    def update_task(
        self,
        task_id: int,
        label: Optional[str] = None,
        target: Optional[Union[int, str]] = None,
        frequency: Optional[TaskFrequency] = None,
        linked_view: Optional[Union[View, str]] = None,
        external_url: Optional[str] = None,
    ) -> TaskRecord:
        """Edit a task in place. Lowering the target re-clamps its progress.

        ``None`` leaves a field unchanged; an empty string clears
        ``linked_view`` or ``external_url``.
        """
        task = self._find(task_id)
        changes: dict = {}
        if label is not None:
            if not label.strip():
                raise InvalidTaskError("label must not be blank", task_id)
            changes["label"] = label.strip()
        if target is not None:
            try:
                changes["target"] = max(1, int(target))
            except (TypeError, ValueError):
                raise InvalidTaskError(f"target must be a whole number, got {target!r}", task_id)
        if frequency is not None:
            try:
                changes["frequency"] = TaskFrequency(frequency).value
            except ValueError:
                raise InvalidTaskError(f"Unknown frequency {frequency!r}", task_id)
        if linked_view is not None:
            try:
                changes["linked_view"] = View(linked_view).value if linked_view else None
            except ValueError:
                raise InvalidTaskError(f"Unknown view {linked_view!r}", task_id)
        if external_url is not None:
            changes["external_url"] = ensure_https(external_url) or None
        if not changes:
            return task

        new_target = changes.get("target", task.target)
        changes["completed_count"] = clamp_count(task.completed_count, new_target)
        updated = task.model_copy(update=changes)
        tasks = [updated if t.id == task_id else t for t in self.tasks]
        self._commit(self._state.model_copy(update={"tasks": tasks}))
        logger.debug(f"Updated task {task_id}: {sorted(changes)}")
        return updated

    def remove_task(self, task_id: int) -> None:
        """Remove a task. Removed seed tasks stay away until restore-defaults."""
        task = self._find(task_id)
        tasks = [t for t in self.tasks if t.id != task_id]
        dismissed = list(self._state.dismissed_defaults)
        if task.is_default and task_id not in dismissed:
            dismissed.append(task_id)
        next_id = next_task_id(self.tasks, self._state.next_id, self._reserved_ids())
        self._commit(
            self._state.model_copy(
                update={"tasks": tasks, "dismissed_defaults": dismissed, "next_id": next_id}
            )
        )
        logger.debug(f"Removed task {task_id}")

    def reorder_tasks(self, task_ids: Sequence[int]) -> List[TaskRecord]:
        """Reorder tasks; ``task_ids`` must be a permutation of the current ids."""
        by_id = {t.id: t for t in self.tasks}
        if len(task_ids) != len(by_id) or set(task_ids) != set(by_id):
            raise InvalidTaskError("task order must list every current task id exactly once")
        tasks = [by_id[i] for i in task_ids]
        self._commit(self._state.model_copy(update={"tasks": tasks}))
        return tasks

    def restore_defaults(self) -> List[TaskRecord]:
        """Re-add every missing seed task and forget dismissals."""
        tasks = reconcile(self.tasks, self.default_seed)
        self._commit(self._state.model_copy(update={"tasks": tasks, "dismissed_defaults": []}))
        logger.info(f"Restored defaults; {len(tasks)} tasks")
        return tasks

    def reset_all(self) -> AppState:
        """Drop every task, streak and history entry and start from the seed."""
        self.repository.clear_state()
        logger.info("All tracker data reset")
        return self._commit(fresh_state(self.default_seed, self.clock()))

    def _reserved_ids(self) -> List[int]:
        return [t.id for t in self.default_seed] + list(self._state.dismissed_defaults)

    # ---- settings ----

    def get_settings(self) -> Settings:
        return self.repository.load_settings()

    def update_settings(self, settings: Settings) -> Settings:
        self.repository.save_settings(settings)
        return settings
