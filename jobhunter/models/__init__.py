"""Data models for jobhunter."""

from jobhunter.models.task import TaskRecord, TaskFrequency, View, clamp_count
from jobhunter.models.history import HistoryEntry, DayProgress, ProgressSummary
from jobhunter.models.state import AppState, Settings
from jobhunter.models.job import JobApplication, JobStatus, Contact, ContactStatus

__all__ = [
    "TaskRecord",
    "TaskFrequency",
    "View",
    "clamp_count",
    "HistoryEntry",
    "DayProgress",
    "ProgressSummary",
    "AppState",
    "Settings",
    "JobApplication",
    "JobStatus",
    "Contact",
    "ContactStatus",
]
