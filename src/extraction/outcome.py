from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from task_manager.models import ParsedTask


class FailureReason(str, Enum):
    UNCONFIGURED = "unconfigured"
    TRANSPORT = "transport"
    EMPTY_REPLY = "empty_reply"
    MALFORMED_REPLY = "malformed_reply"


@dataclass(frozen=True)
class ExtractionFailure:
    reason: FailureReason
    detail: str = ""


@dataclass(frozen=True)
class ExtractionOutcome:
    """Either a task or the reason the model-backed path could not produce one."""

    task: Optional[ParsedTask] = None
    failure: Optional[ExtractionFailure] = None

    @property
    def ok(self) -> bool:
        return self.task is not None

    @classmethod
    def success(cls, task: ParsedTask) -> "ExtractionOutcome":
        return cls(task=task)

    @classmethod
    def failed(cls, reason: FailureReason, detail: str = "") -> "ExtractionOutcome":
        return cls(failure=ExtractionFailure(reason=reason, detail=detail))
