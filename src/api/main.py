import logging

from fastapi import FastAPI

from api.routers import ops, tasks
from task_manager.settings import get_settings

settings = get_settings()

# Logging configuration
logging.basicConfig(
    level=logging.DEBUG if settings.verbose else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Natural Language Task Manager")
app.include_router(tasks.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    if settings.model_configured:
        logger.info(f"Model-backed extraction enabled (model: {settings.openai_model})")
    else:
        logger.info("OPENAI_API_KEY not set; all tasks will use the rule-based parser")
