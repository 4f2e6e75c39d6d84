"""Task model — the single entity tracked by the dashboard."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    """Ordered priority levels: HIGH > MEDIUM > LOW"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Priority"]:
        # Accept "high", "HIGH", " Medium " from loosely typed records
        if isinstance(value, str):
            wanted = value.strip().casefold()
            for member in cls:
                if member.value.casefold() == wanted:
                    return member
        return None

    @property
    def weight(self) -> int:
        """Sort weight; larger ranks first."""
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class _TaskFields(BaseModel):
    """Fields shared by stored tasks and creation input."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    title: str = Field(description="Display title, never blank")
    revenue: Optional[float] = Field(default=None, description="Currency amount earned by the task")
    time_taken: Optional[float] = Field(default=None, alias="timeTaken", description="Duration spent on the task")
    priority: Priority = Field(default=Priority.MEDIUM, description="High, Medium or Low")
    status: str = Field(default="open", description="Lifecycle tag, opaque to the engine")
    notes: str = Field(default="", description="Free-form text")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: Any) -> Any:
        return "" if value is None else value


class TaskInput(_TaskFields):
    """Caller-supplied fields for a new task. id and createdAt are store-generated."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class TaskPatch(BaseModel):
    """Partial update. Only fields explicitly set are merged."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = None
    revenue: Optional[float] = None
    time_taken: Optional[float] = Field(default=None, alias="timeTaken")
    priority: Optional[Priority] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Explicitly set fields, keyed by field name."""
        return self.model_dump(exclude_unset=True)


class Task(_TaskFields):
    """A tracked piece of work. ROI is derived on demand, never stored here."""

    id: str = Field(frozen=True, description="Opaque unique identifier, write-once")
    created_at: datetime = Field(frozen=True, alias="createdAt", description="Creation timestamp, write-once")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("id must not be empty")
        return value

    def to_record(self) -> dict[str, Any]:
        """Wire-shaped dict (camelCase keys) for the external fetch/save layer."""
        return self.model_dump(mode="json", by_alias=True)

    def __repr__(self) -> str:
        return (
            f"Task(id={self.id!r}, title={self.title!r}, "
            f"priority={self.priority.value}, status={self.status!r})"
        )

