import logging
from typing import Dict

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import get_task_store
from api.metrics import TASKS_STORED
from task_manager.models import Task
from task_manager.settings import get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(store: Dict[str, Task] = Depends(get_task_store)) -> dict:
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "model_configured": get_settings().model_configured,
        "tasks_stored": len(store),
    }


@router.get("/metrics")
async def metrics(store: Dict[str, Task] = Depends(get_task_store)) -> Response:
    """
    Prometheus scrape endpoint.
    """
    try:
        TASKS_STORED.set(len(store))
    except Exception:
        pass

    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
