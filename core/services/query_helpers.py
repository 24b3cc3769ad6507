# =============================================================================
# core/services/query_helpers.py - Shared Query Building
# =============================================================================
# Small helpers every indicator service uses to turn request filters into
# PostgREST query clauses: date bounds, pagination windows, CSV export.
# =============================================================================

import io
from typing import Any

import pandas as pd

from app.exceptions import InvalidQueryError
from lib.utils import parse_date_bound

UTF8_BOM = "\ufeff"


def normalize_date_bounds(
    start_date: str | None,
    end_date: str | None,
) -> tuple[str | None, str | None]:
    """
    Normalize start/end filters to day granularity.

    Raises:
        InvalidQueryError: If a bound is not YYYY-MM or YYYY-MM-DD
    """
    bounds = []
    for name, value in (("start_date", start_date), ("end_date", end_date)):
        try:
            bounds.append(parse_date_bound(value))
        except ValueError:
            raise InvalidQueryError(name, value, "a date formatted YYYY-MM or YYYY-MM-DD")
    return bounds[0], bounds[1]


def apply_date_bounds(query, start_date: str | None, end_date: str | None, column: str = "date"):
    """Add inclusive gte/lte clauses for already-normalized bounds."""
    if start_date:
        query = query.gte(column, start_date)
    if end_date:
        query = query.lte(column, end_date)
    return query


def page_window(page: int, limit: int) -> tuple[int, int]:
    """
    Inclusive row range for a 1-based page.

    Example:
        page_window(2, 100)  # (100, 199)
    """
    offset = (page - 1) * limit
    return offset, offset + limit - 1


def split_codes(value: str | None) -> list[str]:
    """Parse a comma separated code list ("A,B, C") into ["A", "B", "C"]."""
    if not value:
        return []
    return [code.strip() for code in value.split(",") if code.strip()]


def filtered_by(**filters: Any) -> dict[str, Any]:
    """Echo the filters that were actually applied, for response metadata."""
    return {key: value for key, value in filters.items() if value not in (None, "", [])}


def rows_to_csv(rows: list[dict[str, Any]]) -> str:
    """
    Render rows as CSV text prefixed with a UTF-8 BOM so spreadsheet
    programs pick the right encoding.
    """
    buffer = io.StringIO()
    pd.DataFrame(rows).to_csv(buffer, index=False)
    return UTF8_BOM + buffer.getvalue()
