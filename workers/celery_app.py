# =============================================================================
# workers/celery_app.py - Celery Application Configuration
# =============================================================================
# This module creates and configures the Celery application instance used for
# the scheduled data refresh jobs.
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker --loglevel=info
#
#   # Check status
#   celery -A workers.celery_app status
# =============================================================================

import logging

from celery import Celery
from celery.signals import task_failure, task_postrun, task_prerun
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.config import settings

logger = logging.getLogger(__name__)


def redacted_broker(url: str) -> str:
    """Strip credentials from a broker URL before it is logged."""
    return url.split("@")[-1] if "@" in url else url


def create_celery_app() -> Celery:
    """
    Create and configure Celery application.

    Returns:
        Configured Celery app instance
    """
    app = Celery(
        "argenstats_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )

    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app created with broker: {redacted_broker(settings.REDIS_URL)}")

    return app


# Create the Celery app instance
celery_app = create_celery_app()


# =============================================================================
# Celery Signals (Lifecycle Hooks)
# =============================================================================

@task_prerun.connect
def task_prerun_handler(sender=None, task_id=None, task=None, **extra):
    """Log when a task starts."""
    logger.info(f"Task started: {task.name} [{task_id}]")


@task_postrun.connect
def task_postrun_handler(sender=None, task_id=None, task=None, state=None, **extra):
    """Log when a task completes."""
    logger.info(f"Task completed: {task.name} [{task_id}] - State: {state}")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, **extra):
    """Log when a task fails."""
    logger.error(f"Task failed: {sender.name} [{task_id}] - Error: {exception}")


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    celery_app.start()
