# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Reports the state of refresh tasks queued by /api/cron/*.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Path
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    message: str | None = None
    result: dict[str, Any] | None = None
    error: str | None = None


STATUS_MESSAGES = {
    "PENDING": "Waiting in queue...",
    "STARTED": "Running...",
    "RETRY": "Retrying...",
    "SUCCESS": "Complete",
    "FAILURE": "Failed",
}


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    task_id: Annotated[str, Path(description="Celery task ID")]
):
    """
    Get the status of a refresh task.

    - PENDING: Task is waiting in queue (or the id is unknown)
    - STARTED: Task has been picked up by a worker
    - SUCCESS: Task completed; `result` holds the refresh summary
    - FAILURE: Task failed; `error` holds the message
    """
    from workers.celery_app import celery_app

    result = celery_app.AsyncResult(task_id)
    response = TaskStatusResponse(
        task_id=task_id,
        status=result.status,
        message=STATUS_MESSAGES.get(result.status),
    )

    if result.status == "SUCCESS":
        response.result = result.result
    elif result.status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"

    return response
