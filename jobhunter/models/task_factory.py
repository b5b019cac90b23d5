"""Task creation factory for jobhunter.

Centralizes id allocation and defaulting so every entry point builds task
records the same way.
"""

from typing import Iterable, Optional

from jobhunter.models.task import TaskFrequency, TaskRecord, View


def ensure_https(url: Optional[str]) -> str:
    """Prefix bare links with ``https://``.

    Args:
        url: User-entered link, possibly without a scheme

    Returns:
        The link with a scheme, or an empty string for empty input
    """
    if not url:
        return ""
    url = url.strip()
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return "https://" + url


def next_task_id(tasks: Iterable[TaskRecord], counter: Optional[int] = None, reserved: Iterable[int] = ()) -> int:
    """Pick the next task id.

    The persisted counter wins when it is ahead of every known id, so ids of
    removed tasks are never handed out again. Snapshots without a counter fall
    back to one past the highest id seen (including reserved seed ids).
    """
    highest = max([t.id for t in tasks] + list(reserved) + [0])
    if counter is not None and counter > highest:
        return counter
    return highest + 1


def create_task(
    task_id: int,
    label: str,
    target: int = 1,
    frequency: TaskFrequency = TaskFrequency.DAILY,
    linked_view: Optional[View] = None,
    external_url: Optional[str] = None,
) -> TaskRecord:
    """Create a user task with zero progress.

    Raises:
        ValueError: If the label is blank
    """
    if not label or not label.strip():
        raise ValueError("label is required")
    return TaskRecord(
        id=task_id,
        label=label.strip(),
        target=target,
        completed_count=0,
        frequency=frequency,
        is_default=False,
        linked_view=linked_view,
        external_url=ensure_https(external_url) or None,
    )
