"""Application state and settings models for jobhunter."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from jobhunter.models.history import HistoryEntry
from jobhunter.models.task import TaskRecord, View


class AppState(BaseModel):
    """The whole persisted tracker state.

    ``last_date`` and ``last_week`` are optional on purpose: a snapshot written
    before a field existed must read as "unknown", which forces a reset.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    tasks: Optional[List[TaskRecord]] = Field(None, description="Ordered task records (display order)")
    history: Dict[str, HistoryEntry] = Field(default_factory=dict, description="Day key -> snapshot")
    last_date: Optional[str] = Field(None, alias="lastDate", description="Day key of last reset evaluation")
    last_week: Optional[str] = Field(None, alias="lastWeek", description="Week key of last reset evaluation")
    next_id: Optional[int] = Field(None, alias="nextId", description="Next task id to allocate")
    dismissed_defaults: List[int] = Field(
        default_factory=list,
        alias="dismissedDefaults",
        description="Default task ids the user removed",
    )

    def task_list(self) -> List[TaskRecord]:
        return list(self.tasks or [])

    def to_blob(self) -> dict:
        """Serialize for the persistence adapter (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


class Settings(BaseModel):
    """UI settings blob, stored separately from the tracker state."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    default_view: View = Field(View.CHECKLIST, alias="defaultView", description="View opened first")
