from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from extraction.model_extractor import ModelBackedExtractor
from extraction.outcome import ExtractionOutcome, FailureReason
from extraction.rule_extractor import RuleBasedExtractor
from llm.llm_client import LLMClient
from task_manager.models import ParsedTask
from task_manager.settings import Settings, get_settings

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "fallback parser used"


@dataclass(frozen=True)
class Resolution:
    task: ParsedTask
    strategy: str  # "model" or "rules"
    notice: Optional[str] = None
    failure_reason: Optional[FailureReason] = None

    @property
    def fallback_used(self) -> bool:
        return self.strategy == "rules"


class ExtractionCoordinator:
    """Model-backed extraction first, rule-based extraction on any failure.

    ``resolve_task`` always returns a task; the only trace of a failed model
    call is the informational ``notice`` on the resolution.
    """

    def __init__(
        self,
        model_extractor: Optional[ModelBackedExtractor] = None,
        rule_extractor: Optional[RuleBasedExtractor] = None,
    ):
        self.model_extractor = model_extractor or ModelBackedExtractor()
        self.rule_extractor = rule_extractor or RuleBasedExtractor()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "ExtractionCoordinator":
        settings = settings or get_settings()
        return cls(
            model_extractor=ModelBackedExtractor(
                llm_client=LLMClient(settings=settings),
                clock=clock,
                verbose=settings.verbose,
            ),
            rule_extractor=RuleBasedExtractor(clock=clock),
        )

    def resolve_task(self, text: str) -> Resolution:
        try:
            outcome = self.model_extractor.extract(text)
        except Exception as e:
            logger.exception("Unexpected error in model extraction")
            outcome = ExtractionOutcome.failed(FailureReason.TRANSPORT, e.__class__.__name__)

        if outcome.ok:
            return Resolution(task=outcome.task, strategy="model")

        failure = outcome.failure
        if failure.reason is FailureReason.UNCONFIGURED:
            logger.info("Model extraction unavailable (no API key); using rule-based parser")
        else:
            logger.info(f"Model extraction failed ({failure.reason.value}: {failure.detail}); using rule-based parser")

        return Resolution(
            task=self.rule_extractor.extract(text),
            strategy="rules",
            notice=FALLBACK_NOTICE,
            failure_reason=failure.reason,
        )


def resolve_task(text: str) -> Resolution:
    """Resolve ``text`` with a coordinator built from the current environment."""
    return ExtractionCoordinator.from_settings().resolve_task(text)
