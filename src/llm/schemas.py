from __future__ import annotations
from typing import Optional
from pydantic import BaseModel


class ModelReply(BaseModel):
    """Task record as the remote model is instructed to return it.

    Every field is optional here; defaults are applied after salvage.
    """

    taskName: Optional[str] = None
    assignee: Optional[str] = None
    dueDate: Optional[str] = None
    priority: Optional[str] = None
