# =============================================================================
# app/responses.py - Shared Response Builders
# =============================================================================

from typing import Any

from fastapi.responses import Response

from app.exceptions import IndicatorNotFoundError
from core.services.query_helpers import rows_to_csv

# Cache-Control values for indicator data
CACHE_HOURLY = "public, max-age=3600, stale-while-revalidate=86400"
CACHE_SHORT = "public, max-age=300, stale-while-revalidate=900"
CACHE_SIX_HOURS = "public, max-age=21600, stale-while-revalidate=43200"


def csv_response(rows: list[dict[str, Any]], filename: str, indicator: str) -> Response:
    """
    Download response for a set of rows.

    Raises:
        IndicatorNotFoundError: If there is nothing to export
    """
    if not rows:
        raise IndicatorNotFoundError(indicator, {"format": "csv"})
    return Response(
        content=rows_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
