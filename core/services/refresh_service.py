# =============================================================================
# core/services/refresh_service.py - Upstream Data Refresh
# =============================================================================
# Pulls fresh quotes from api.argentinadatos.com and upserts them:
#   dollar        /v1/cotizaciones/dolares             -> dollar_rates (date, dollar_type)
#   country risk  /v1/finanzas/indices/riesgo-pais     -> embi_risk (date)
#
# Every run, successful or not, leaves one row in cron_executions.
# These run inside Celery tasks (see workers/tasks.py), never in a request.
# =============================================================================

import logging
from datetime import datetime
from typing import Any

import httpx

from app.config import settings
from core.models.indicators import DOLLAR_TYPE_MAPPING
from lib.supabase_client import SupabaseClient
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DOLLAR_PATH = "/v1/cotizaciones/dolares"
RISK_COUNTRY_PATH = "/v1/finanzas/indices/riesgo-pais"

DOLLAR_TABLE = "dollar_rates"
RISK_TABLE = "embi_risk"


class RefreshError(ApplicationError):
    """Upstream source could not be read or returned an unexpected shape."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            message=f"Could not refresh {source}: {reason}",
            code="REFRESH_FAILED",
            status_code=502,
            details={"source": source},
        )


def map_dollar_rows(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Convert upstream quotes to dollar_rates rows.

    Unknown "casa" values are kept, upper-cased, rather than dropped.
    """
    now = datetime.utcnow().isoformat()
    rows = []
    for item in items:
        casa = (item.get("casa") or "").lower()
        dollar_type = DOLLAR_TYPE_MAPPING.get(casa)
        rows.append({
            "date": item.get("fecha"),
            "dollar_type": dollar_type.value if dollar_type else casa.upper(),
            "buy_price": item.get("compra") or 0,
            "sell_price": item.get("venta") or 0,
            "updated_at": now,
        })
    return [row for row in rows if row["date"] and row["dollar_type"]]


def map_risk_rows(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert upstream {fecha, valor} points to embi_risk rows."""
    return [
        {"external_id": f"embi-{item['fecha']}", "date": item["fecha"], "value": item.get("valor")}
        for item in items
        if item.get("fecha") and item.get("valor") is not None
    ]


class RefreshService:
    """
    Fetches upstream data and stores it.

    Args:
        db: Supabase client wrapper
        http_client: Optional httpx client, injected by tests
    """

    def __init__(self, db: SupabaseClient, http_client: httpx.Client | None = None):
        self.db = db
        self._http = http_client or httpx.Client(base_url=settings.ARGENTINADATOS_BASE_URL)

    def _fetch(self, source: str, path: str) -> list[dict[str, Any]]:
        try:
            response = self._http.get(path, headers={"Accept": "application/json"})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RefreshError(source, str(e))
        if not isinstance(payload, list):
            raise RefreshError(source, "expected a JSON array")
        logger.info(f"Fetched {len(payload)} {source} items from upstream")
        return payload

    def _run(self, source: str, path: str, mapper, table: str, on_conflict: str) -> dict[str, Any]:
        started = datetime.utcnow()
        try:
            rows = mapper(self._fetch(source, path))
            saved = self.db.run(
                self.db.table(table).upsert(rows, on_conflict=on_conflict),
                f"upsert {source}",
            ) if rows else []
        except ApplicationError as e:
            logger.error(f"{source} refresh failed: {e}")
            self.db.log_cron_execution("error", {"source": source, "error": e.message})
            raise

        result = {
            "source": source,
            "records_processed": len(rows),
            "records_saved": len(saved),
            "last_date": max((row["date"] for row in rows), default=None),
            "duration_ms": int((datetime.utcnow() - started).total_seconds() * 1000),
        }
        logger.info(f"{source} refresh complete: {result['records_saved']} rows saved")
        self.db.log_cron_execution("success", result)
        return result

    def refresh_dollar(self) -> dict[str, Any]:
        return self._run("dollar", DOLLAR_PATH, map_dollar_rows, DOLLAR_TABLE, "date,dollar_type")

    def refresh_risk_country(self) -> dict[str, Any]:
        return self._run("country risk", RISK_COUNTRY_PATH, map_risk_rows, RISK_TABLE, "date")

    def close(self) -> None:
        self._http.close()
