from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, Union

from pydantic import ValidationError

from llm.schemas import ModelReply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalvageFailure:
    stage: str
    reason: str


SalvageResult = Union[ModelReply, SalvageFailure]
SalvageStage = Callable[[str], SalvageResult]

_LEADING_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE_RE = re.compile(r"\s*```$")
_BACKTICKS_RE = re.compile(r"^`+|`+$")
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

_FIELD_RES = {
    name: re.compile(rf'"{name}"\s*:\s*"([^"]+)"')
    for name in ("taskName", "assignee", "dueDate", "priority")
}


def _load(stage: str, text: str) -> SalvageResult:
    try:
        data = json.loads(text)
    except ValueError as e:
        return SalvageFailure(stage, f"invalid JSON: {e}")
    if not isinstance(data, dict):
        return SalvageFailure(stage, f"expected a JSON object, got {type(data).__name__}")
    try:
        return ModelReply.model_validate(data)
    except ValidationError as e:
        return SalvageFailure(stage, f"schema mismatch: {e.error_count()} error(s)")


def strip_fences(raw: str) -> str:
    text = raw.strip()
    text = _LEADING_FENCE_RE.sub("", text)
    text = _TRAILING_FENCE_RE.sub("", text)
    return _BACKTICKS_RE.sub("", text).strip()


def parse_direct(raw: str) -> SalvageResult:
    return _load("direct", raw.strip())


def parse_unfenced(raw: str) -> SalvageResult:
    return _load("unfenced", strip_fences(raw))


def parse_embedded_object(raw: str) -> SalvageResult:
    m = _OBJECT_RE.search(strip_fences(raw))
    if not m:
        return SalvageFailure("embedded_object", "no brace-delimited object found")
    return _load("embedded_object", m.group(0))


def parse_fields(raw: str) -> SalvageResult:
    """Last resort: pull ``"field": "value"`` pairs straight out of the text."""
    found = {}
    for name, regex in _FIELD_RES.items():
        m = regex.search(raw)
        if m:
            found[name] = m.group(1)
    if "taskName" not in found:
        return SalvageFailure("fields", "taskName not recoverable")
    return ModelReply(**found)


# Strictest first.
SALVAGE_STAGES: tuple[SalvageStage, ...] = (
    parse_direct,
    parse_unfenced,
    parse_embedded_object,
    parse_fields,
)


def salvage_reply(raw: str, stages: tuple[SalvageStage, ...] = SALVAGE_STAGES) -> Union[ModelReply, list[SalvageFailure]]:
    """Run ``stages`` in order and return the first parsed reply.

    When every stage fails, the list of failures is returned instead.
    """
    failures: list[SalvageFailure] = []
    for stage in stages:
        result = stage(raw)
        if isinstance(result, ModelReply):
            if failures:
                logger.debug("Reply salvaged by stage %s after %d failure(s)", stage.__name__, len(failures))
            return result
        logger.debug("Salvage stage %s failed: %s", result.stage, result.reason)
        failures.append(result)
    return failures
