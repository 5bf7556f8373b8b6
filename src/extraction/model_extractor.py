from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from extraction.outcome import ExtractionOutcome, FailureReason
from extraction.prompts import build_system_prompt
from extraction.reply_parser import salvage_reply
from llm.llm_client import LLMClient
from llm.providers.base import LLMUnavailableError
from llm.schemas import ModelReply
from task_manager.models import DEFAULT_PRIORITY, PRIORITIES, ParsedTask

logger = logging.getLogger(__name__)


def _normalize_priority(value: Optional[str]) -> str:
    if value is None:
        return DEFAULT_PRIORITY
    v = value.strip().upper()
    return v if v in PRIORITIES else DEFAULT_PRIORITY


def _parse_due_date(value: Optional[str]) -> Optional[datetime]:
    if not value or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1]
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.warning(f"Dropping unparseable dueDate from model reply: {value!r}")
        return None


def to_parsed_task(reply: ModelReply, text: str) -> ParsedTask:
    """Apply defaults to a salvaged reply: raw input as name, P3 as priority."""
    task_name = reply.taskName if reply.taskName and reply.taskName.strip() else text
    return ParsedTask(
        task_name=task_name,
        assignee=reply.assignee,
        due_date=_parse_due_date(reply.dueDate),
        priority=_normalize_priority(reply.priority),
    )


class ModelBackedExtractor:
    """Delegates extraction to a remote text-completion model.

    Never raises for expected failures; the returned outcome says why the
    model path could not produce a task so the caller can fall back.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        clock: Callable[[], datetime] = datetime.now,
        verbose: Optional[bool] = None,
    ):
        self.llm = llm_client or LLMClient()
        self._clock = clock
        self.verbose = self.llm.settings.verbose if verbose is None else verbose

    def extract(self, text: str) -> ExtractionOutcome:
        if not self.llm.is_configured:
            return ExtractionOutcome.failed(FailureReason.UNCONFIGURED, "no API key configured")

        system = build_system_prompt(self._clock().date())
        if self.verbose:
            logger.info(f"Sending task to model: {text!r} (prompt {len(system)} chars)")

        try:
            reply = self.llm.complete(system=system, user=text)
        except LLMUnavailableError as e:
            return ExtractionOutcome.failed(FailureReason.UNCONFIGURED, str(e))
        except httpx.HTTPStatusError as e:
            logger.warning(f"Model API returned {e.response.status_code}: {e.response.text[:500]}")
            return ExtractionOutcome.failed(FailureReason.TRANSPORT, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Model API request failed: {e}")
            return ExtractionOutcome.failed(FailureReason.TRANSPORT, str(e) or e.__class__.__name__)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Model API response had an unexpected shape: {e!r}")
            return ExtractionOutcome.failed(FailureReason.TRANSPORT, "unexpected response envelope")

        if self.verbose:
            logger.info(f"Model reply: {reply!r}")

        if not reply or not reply.strip():
            logger.warning("Empty reply from model API")
            return ExtractionOutcome.failed(FailureReason.EMPTY_REPLY)

        salvaged = salvage_reply(reply)
        if not isinstance(salvaged, ModelReply):
            reasons = "; ".join(f"{f.stage}: {f.reason}" for f in salvaged)
            logger.warning(f"Could not parse model reply ({reasons}). Raw reply: {reply!r}")
            return ExtractionOutcome.failed(FailureReason.MALFORMED_REPLY, reasons)

        try:
            task = to_parsed_task(salvaged, text)
        except ValidationError as e:
            logger.warning(f"Model reply did not form a valid task: {e}. Raw reply: {reply!r}")
            return ExtractionOutcome.failed(FailureReason.MALFORMED_REPLY, "invalid task fields")

        logger.debug(f"Model extraction: {task.model_dump()}")
        return ExtractionOutcome.success(task)
