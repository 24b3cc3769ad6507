# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# the scheduled data refresh jobs.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (dollar and country risk refresh)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,refresh --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import refresh_dollar_task
#   result = refresh_dollar_task.delay()
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
