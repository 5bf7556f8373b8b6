import asyncio
import logging
import time
import uuid
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError, field_validator

from api.dependencies import get_coordinator, get_task_store
from api.metrics import (
    REQUESTS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    EXTRACTIONS_TOTAL,
    FALLBACK_TOTAL,
    TASKS_STORED,
)
from extraction.coordinator import ExtractionCoordinator, Resolution
from task_manager.models import ParsedTask, Task, TaskUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


class TaskTextIn(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must not be blank")
        return v


class ResolutionOut(BaseModel):
    task: ParsedTask
    fallback_used: bool
    notice: Optional[str] = None


async def _resolve(coordinator: ExtractionCoordinator, text: str) -> Resolution:
    # One blocking round-trip to the model (or none); keep it off the event loop.
    resolution = await asyncio.to_thread(coordinator.resolve_task, text)

    # Prometheus counters (best-effort)
    try:
        EXTRACTIONS_TOTAL.labels(strategy=resolution.strategy).inc()
        if resolution.failure_reason is not None:
            FALLBACK_TOTAL.labels(reason=resolution.failure_reason.value).inc()
    except Exception:
        pass

    return resolution


def _observe(endpoint: str, status: str, start: float) -> None:
    try:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
    except Exception:
        pass


@router.post("/tasks")
async def add_task(
    payload: TaskTextIn,
    coordinator: ExtractionCoordinator = Depends(get_coordinator),
    store: Dict[str, Task] = Depends(get_task_store),
) -> dict:
    """Parse free text into a task, give it an id and store it."""
    start = time.time()
    logger.info(f"Received task text: {payload.text[:50]}...")

    resolution = await _resolve(coordinator, payload.text)
    task = Task.from_parsed(resolution.task, uuid.uuid4().hex)
    store[task.id] = task

    try:
        TASKS_STORED.set(len(store))
    except Exception:
        pass
    _observe("/tasks", "created", start)

    return {
        "task": task.model_dump(mode="json"),
        "fallback_used": resolution.fallback_used,
        "notice": resolution.notice,
    }


@router.post("/tasks/parse", response_model=ResolutionOut)
async def parse_task(
    payload: TaskTextIn,
    coordinator: ExtractionCoordinator = Depends(get_coordinator),
) -> ResolutionOut:
    """Parse free text without storing anything."""
    start = time.time()
    resolution = await _resolve(coordinator, payload.text)
    _observe("/tasks/parse", "parsed", start)
    return ResolutionOut(
        task=resolution.task,
        fallback_used=resolution.fallback_used,
        notice=resolution.notice,
    )


@router.get("/tasks")
async def get_tasks(store: Dict[str, Task] = Depends(get_task_store)) -> dict:
    """All tasks in the order they were added."""
    return {
        "tasks": [t.model_dump(mode="json") for t in store.values()],
        "total": len(store),
    }


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    store: Dict[str, Task] = Depends(get_task_store),
) -> dict:
    """Inline edit: replace only the fields present in the request body."""
    task = store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    try:
        updated = task.apply(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid update: {e.errors()[0]['msg']}")

    store[task_id] = updated
    logger.info(f"Task {task_id} updated: {sorted(payload.model_fields_set)}")
    return {"task": updated.model_dump(mode="json")}


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str, store: Dict[str, Task] = Depends(get_task_store)) -> dict:
    if store.pop(task_id, None) is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")

    try:
        TASKS_STORED.set(len(store))
    except Exception:
        pass

    return {"status": "deleted", "task_id": task_id}
