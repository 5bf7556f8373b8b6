from __future__ import annotations
from abc import ABC, abstractmethod


class LLMUnavailableError(RuntimeError):
    """No credential configured for the remote model. Expected, not a fault."""


class LLMProvider(ABC):
    @abstractmethod
    def generate(self, *, system: str, user: str) -> str:
        """
        Must return the model output as TEXT (the extractor parses/validates it).
        """
        raise NotImplementedError
