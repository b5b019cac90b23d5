"""Task record model for jobhunter."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskFrequency(str, Enum):
    """How often a task's completion count starts over."""
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"  # Selectable, but never reset automatically


class View(str, Enum):
    """Views a task can link to (and the app can open first)."""
    CHECKLIST = "checklist"
    APPLY = "apply"
    LEETCODE = "leetcode"
    RESUME = "resume"
    LATEX_INFO = "latex-info"


def clamp_count(value: int, target: int) -> int:
    """Clamp a completion count into [0, target]."""
    return max(0, min(int(value), int(target)))


class TaskRecord(BaseModel):
    """A single schedulable checklist item.

    Field names are persisted in camelCase (``completedCount``, ``isDefault``, ...)
    so the stored blob stays readable by older snapshots.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, frozen=True)

    id: int = Field(..., description="Stable identifier, never reused")
    label: str = Field(..., description="Human-readable description")
    target: int = Field(1, description="Completion count that counts as done for the period")
    completed_count: int = Field(0, alias="completedCount", description="Progress within the current period")
    frequency: TaskFrequency = Field(TaskFrequency.DAILY, description="Reset period")
    is_default: bool = Field(False, alias="isDefault", description="Seed task offered by restore-defaults")
    linked_view: Optional[View] = Field(None, alias="linkedView", description="In-app navigation target")
    external_url: Optional[str] = Field(None, alias="externalUrl", description="External navigation target")

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, v):
        # Zero, negative or empty targets fall back to 1
        try:
            v = int(v)
        except (TypeError, ValueError):
            return 1
        return v if v >= 1 else 1

    @field_validator("completed_count", mode="before")
    @classmethod
    def _clamp_completed(cls, v, info):
        try:
            v = int(v)
        except (TypeError, ValueError):
            return 0
        target = info.data.get("target", 1)
        return clamp_count(v, target)

    @field_validator("frequency", mode="before")
    @classmethod
    def _coerce_frequency(cls, v):
        if isinstance(v, TaskFrequency):
            return v
        try:
            return TaskFrequency(str(v).lower())
        except ValueError:
            return TaskFrequency.DAILY

    @field_validator("linked_view", mode="before")
    @classmethod
    def _coerce_linked_view(cls, v):
        if v is None or isinstance(v, View):
            return v
        try:
            return View(str(v).lower())
        except ValueError:
            return None

    @property
    def is_done(self) -> bool:
        return self.completed_count >= self.target

    def with_count(self, count: int) -> "TaskRecord":
        """Return a copy with ``completed_count`` set and clamped to the target."""
        return self.model_copy(update={"completed_count": clamp_count(count, self.target)})

    def reset(self) -> "TaskRecord":
        return self.with_count(0)
