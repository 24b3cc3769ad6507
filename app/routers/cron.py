# =============================================================================
# app/routers/cron.py - Scheduled Refresh Triggers
# =============================================================================
# Called by the external scheduler with "Authorization: Bearer <secret>".
# Each endpoint only enqueues a Celery task and returns its id; progress is
# available from /api/tasks/{task_id}.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from kombu.exceptions import OperationalError
from pydantic import BaseModel

from app.dependencies import require_cron_secret
from app.exceptions import QueueUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_cron_secret)])


class CronTriggerResponse(BaseModel):
    """Response model for task submission."""
    task_id: str
    status: str
    message: str


def enqueue(task, label: str) -> CronTriggerResponse:
    try:
        result = task.delay()
    except OperationalError as e:
        logger.error(f"Could not queue {label} refresh: {e}")
        raise QueueUnavailableError(str(e))

    logger.info(f"Queued {label} refresh {result.id}")
    return CronTriggerResponse(
        task_id=result.id,
        status="PENDING",
        message=f"{label.capitalize()} refresh queued. Use GET /api/tasks/{{task_id}} to check status.",
    )


@router.get("/update-dollar", response_model=CronTriggerResponse)
async def trigger_dollar_update():
    """Queue a refresh of dollar quotes."""
    from workers.tasks import refresh_dollar_task

    return enqueue(refresh_dollar_task, "dollar")


@router.get("/update-riesgo-pais", response_model=CronTriggerResponse)
async def trigger_risk_country_update():
    """Queue a refresh of country risk closings."""
    from workers.tasks import refresh_risk_country_task

    return enqueue(refresh_risk_country_task, "country risk")
