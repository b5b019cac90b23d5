"""Constants for jobhunter.

This module centralizes storage keys, window sizes and the default task seed.
"""

from jobhunter.models.task import TaskFrequency, TaskRecord, View


# Persistence keys
STORAGE_KEY = "jobhunter_state_v1"
SETTINGS_KEY = "jobhunter_settings_v1"
JOBS_KEY = "job_applications"

# History projection
HISTORY_WINDOW_DAYS = 7

# Default seed, re-offered by restore-defaults and merged in on every load
DEFAULT_TASKS: tuple[TaskRecord, ...] = (
    TaskRecord(
        id=1,
        label="Apply to 3 jobs",
        target=3,
        frequency=TaskFrequency.DAILY,
        linked_view=View.APPLY,
        is_default=True,
    ),
    TaskRecord(
        id=2,
        label="Solve 1 LeetCode / interview problem",
        target=1,
        frequency=TaskFrequency.DAILY,
        linked_view=View.LEETCODE,
        is_default=True,
    ),
    TaskRecord(
        id=3,
        label="Send 2 networking messages on LinkedIn",
        target=2,
        frequency=TaskFrequency.DAILY,
        linked_view=View.APPLY,
        is_default=True,
    ),
    TaskRecord(
        id=4,
        label="Spend 15 minutes improving resume/portfolio",
        target=1,
        frequency=TaskFrequency.WEEKLY,
        linked_view=View.RESUME,
        is_default=True,
    ),
)
