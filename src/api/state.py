from typing import Dict

from task_manager.models import Task

# In-memory task collection, keyed by id in insertion order. Not persisted.
tasks: Dict[str, Task] = {}
