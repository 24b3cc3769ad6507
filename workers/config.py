# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers.
# =============================================================================

from app.config import settings


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # Publishing raises at once when Redis is down
    task_publish_retry = False

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    task_acks_late = True
    worker_prefetch_multiplier = 1

    # Refresh summaries are kept for a day so the scheduler can inspect them
    result_expires = 86400

    # Upstream fetch plus upsert should finish well inside a minute
    task_time_limit = 120
    task_soft_time_limit = 90

    # Report STARTED so /api/tasks/{id} can tell queued from running
    task_track_started = True

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "refresh": {
            "exchange": "refresh",
            "routing_key": "refresh",
        },
    }

    task_routes = {
        "workers.tasks.refresh_dollar_task": {"queue": "refresh"},
        "workers.tasks.refresh_risk_country_task": {"queue": "refresh"},
    }

    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    timezone = "America/Argentina/Buenos_Aires"
    enable_utc = True
