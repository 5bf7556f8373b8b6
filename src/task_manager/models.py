from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


Priority = Literal["P1", "P2", "P3", "P4"]

# Most to least urgent.
PRIORITIES: tuple[str, ...] = ("P1", "P2", "P3", "P4")
DEFAULT_PRIORITY: Priority = "P3"


class ParsedTask(BaseModel):
    task_name: str = Field(..., min_length=1)
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Priority = DEFAULT_PRIORITY

    @field_validator("task_name")
    @classmethod
    def task_name_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("task_name must not be blank")
        return v2

    @field_validator("assignee")
    @classmethod
    def blank_assignee_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("due_date")
    @classmethod
    def minute_precision(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Local wall-clock time, no timezone, minute precision.
        if v is None:
            return None
        return v.replace(tzinfo=None, second=0, microsecond=0)


class Task(ParsedTask):
    id: str = Field(..., min_length=1)

    @classmethod
    def from_parsed(cls, parsed: ParsedTask, task_id: str) -> "Task":
        return cls(id=task_id, **parsed.model_dump())

    def apply(self, update: "TaskUpdate") -> "Task":
        """Return a copy with the fields set on ``update`` replaced (re-validated)."""
        data = self.model_dump()
        data.update(update.model_dump(exclude_unset=True))
        return Task(**data)


class TaskUpdate(BaseModel):
    """Partial edit of a stored task. Only fields sent by the caller are applied."""

    task_name: Optional[str] = None
    assignee: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: Optional[Priority] = None

    @field_validator("task_name")
    @classmethod
    def task_name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("task_name must not be blank")
        return v
