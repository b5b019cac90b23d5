"""Domain exceptions for jobhunter."""

from typing import Optional


class TrackerError(Exception):
    """Base class for tracker errors surfaced to API callers."""


class TaskNotFoundError(TrackerError):
    """Raised when a mutation names a task id that is not in the current state.

    Attributes:
        task_id: The id that was looked up
    """

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class InvalidTaskError(TrackerError):
    """Raised when a task edit or reorder request is malformed."""

    def __init__(self, message: str, task_id: Optional[int] = None):
        self.message = message
        self.task_id = task_id
        super().__init__(message)


class JobNotFoundError(TrackerError):
    """Raised when a job application id is not in the saved list.

    Attributes:
        job_id: The id that was looked up
    """

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job application {job_id} not found")


class ContactNotFoundError(TrackerError):
    """Raised when a contact id is not attached to the given application."""

    def __init__(self, job_id: int, contact_id: int):
        self.job_id = job_id
        self.contact_id = contact_id
        super().__init__(f"Contact {contact_id} not found on job application {job_id}")


class InvalidJobError(TrackerError):
    """Raised when a job application or contact is missing required fields."""

    def __init__(self, message: str, job_id: Optional[int] = None):
        self.message = message
        self.job_id = job_id
        super().__init__(message)
