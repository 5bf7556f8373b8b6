from typing import Dict, Optional

from api import state
from extraction.coordinator import ExtractionCoordinator
from task_manager.models import Task

_coordinator: Optional[ExtractionCoordinator] = None


def get_coordinator() -> ExtractionCoordinator:
    global _coordinator
    if _coordinator is None:
        _coordinator = ExtractionCoordinator.from_settings()
    return _coordinator


def get_task_store() -> Dict[str, Task]:
    return state.tasks
