# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background tasks that pull fresh data from the upstream public API and
# upsert it into Supabase.
#
# Tasks:
# - refresh_dollar_task: Current quotes for every dollar market
# - refresh_risk_country_task: Daily country risk closings
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from core.services.refresh_service import RefreshError, RefreshService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Upstream hiccups are retried; database errors are not
RETRY_DELAY_SECONDS = 60
MAX_RETRIES = 3


def run_refresh(source: str) -> dict[str, Any]:
    """
    Run one refresh against a fresh database client.

    Args:
        source: "dollar" or "risk_country"

    Returns:
        Refresh summary (records processed/saved, last date, duration)
    """
    service = RefreshService(SupabaseClient.from_settings())
    try:
        if source == "dollar":
            return service.refresh_dollar()
        return service.refresh_risk_country()
    finally:
        service.close()


# =============================================================================
# Refresh Tasks
# =============================================================================

@shared_task(bind=True, name="workers.tasks.refresh_dollar_task", max_retries=MAX_RETRIES)
def refresh_dollar_task(self) -> dict[str, Any]:
    """Fetch current dollar quotes and upsert them by (date, dollar_type)."""
    try:
        return run_refresh("dollar")
    except RefreshError as e:
        logger.warning(f"Dollar refresh attempt {self.request.retries + 1} failed: {e.message}")
        raise self.retry(exc=e, countdown=RETRY_DELAY_SECONDS)


@shared_task(bind=True, name="workers.tasks.refresh_risk_country_task", max_retries=MAX_RETRIES)
def refresh_risk_country_task(self) -> dict[str, Any]:
    """Fetch country risk closings and upsert them by date."""
    try:
        return run_refresh("risk_country")
    except RefreshError as e:
        logger.warning(f"Country risk refresh attempt {self.request.retries + 1} failed: {e.message}")
        raise self.retry(exc=e, countdown=RETRY_DELAY_SECONDS)
