"""History ledger models for jobhunter."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class HistoryEntry(BaseModel):
    """Completion snapshot for one day key.

    ``completed_count`` and ``total`` are optional because early snapshots
    only recorded ``goalMet``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    completed_count: Optional[int] = Field(None, alias="completedCount", description="Tasks fully met that day")
    total: Optional[int] = Field(None, description="Task count that day")
    goal_met: bool = Field(False, alias="goalMet", description="Every task met its target")

    @classmethod
    def from_counts(cls, completed: int, total: int) -> "HistoryEntry":
        return cls(
            completed_count=completed,
            total=total,
            goal_met=completed == total and total > 0,
        )

    def counts(self) -> tuple[int, int]:
        """Return (completed, total), mapping legacy goalMet-only entries to 1/1 or 0/1."""
        if self.completed_count is not None and self.total is not None:
            return self.completed_count, self.total
        return (1 if self.goal_met else 0), 1


class DayProgress(BaseModel):
    """One row of the 7-day history window."""

    key: str = Field(..., description="Day key (YYYY-MM-DD)")
    label: str = Field(..., description="Short display label, e.g. 'Mon 1/1'")
    completed: int = 0
    total: int = 0
    percent: int = 0


class ProgressSummary(BaseModel):
    """Today's progress, the streak and the recent history window."""

    day_key: str
    completed: int
    total: int
    streak: int
    streak_label: str
    history: List[DayProgress] = Field(default_factory=list)
