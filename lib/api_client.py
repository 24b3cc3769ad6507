# =============================================================================
# lib/api_client.py - ArgenStats API Client
# =============================================================================
# Small helpers for calling the public API from another process (dashboards,
# notebooks, the webhook self-test). They build query strings, perform one
# GET each and either return parsed JSON or raise APIRequestError carrying
# the HTTP status. There is no retry; callers decide what to do on failure.
#
# Usage:
#   from lib.api_client import ArgenStatsAPIClient
#   with ArgenStatsAPIClient("https://argenstats.com") as api:
#       data = api.fetch_sector_historical_data(["A", "B"], start_date="2023-01")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError, complete_month_date

logger = logging.getLogger(__name__)

DEFAULT_SECTOR_LIMIT = 100
SECTORS_PATH = "/api/emae/sectors"


class APIRequestError(ApplicationError):
    """Raised when the API answers with a non-success status."""

    def __init__(self, status_code: int, reason: str, url: str | None = None):
        super().__init__(
            message=f"Error: {status_code} {reason}",
            code="API_REQUEST_FAILED",
            status_code=status_code,
            details={"url": url} if url else None,
        )
        self.reason = reason


def build_sector_params(
    sector_codes: list[str] | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    limit: int | None = None,
) -> dict[str, str]:
    """
    Build the query parameters for the sector-breakdown endpoint.

    Partial YYYY-MM dates are completed with the first day of the month.
    """
    params: dict[str, str] = {}
    if sector_codes:
        params["sector_code"] = ",".join(sector_codes)
    if start_date:
        params["start_date"] = complete_month_date(start_date)
    if end_date:
        params["end_date"] = complete_month_date(end_date)
    params["limit"] = str(limit if limit is not None else DEFAULT_SECTOR_LIMIT)
    return params


class ArgenStatsAPIClient:
    """
    Thin httpx wrapper around the public JSON routes.

    Args:
        base_url: Root URL of the API; API_BASE_URL when omitted
        client: Optional preconfigured httpx.Client (tests pass one with a
            MockTransport)
    """

    def __init__(self, base_url: str | None = None, client: httpx.Client | None = None):
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url or settings.API_BASE_URL, timeout=30)

    def __enter__(self) -> "ArgenStatsAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        response = self._client.get(path, params=params)
        if not response.is_success:
            logger.error(f"GET {response.request.url} failed: {response.status_code} {response.reason_phrase}")
            raise APIRequestError(response.status_code, response.reason_phrase, str(response.request.url))
        return response.json()

    # -------------------------------------------------------------------------
    # EMAE sectors
    # -------------------------------------------------------------------------

    def fetch_sector_historical_data(
        self,
        sector_codes: list[str] | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """
        Fetch sector historical data from /api/emae/sectors.

        Returns:
            The parsed JSON body ({data, metadata, pagination})

        Raises:
            APIRequestError: If the API answers with a non-2xx status
        """
        params = build_sector_params(sector_codes, start_date, end_date, limit)
        return self._get(SECTORS_PATH, params)

    def fetch_sector_comparison_data(
        self,
        sector_codes: list[str],
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = DEFAULT_SECTOR_LIMIT,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows for a set of sectors, sorted chronologically.

        Returns an empty list without calling the API when no sector is given.
        """
        if not sector_codes:
            return []

        body = self.fetch_sector_historical_data(sector_codes, start_date, end_date, limit)
        rows = body.get("data")
        if not isinstance(rows, list):
            return []
        return sorted(rows, key=lambda row: row.get("date") or "")

    def fetch_emae_sectors(self) -> list[dict[str, Any]]:
        """List of {code, name} sectors from /api/emae/metadata."""
        return self._get("/api/emae/metadata").get("sectors", [])

    def fetch_stats(self) -> dict[str, Any]:
        return self._get("/api/stats")
