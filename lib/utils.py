# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Slug generation for events and calendar indicators
# - Date normalization for query bounds
# - Base error class
# =============================================================================

import re
import unicodedata
from datetime import date, datetime
from typing import Any


# =============================================================================
# Slug Utilities
# =============================================================================

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    Turn a display name into a URL slug.

    Accents are folded to ASCII, everything is lowercased, and any run of
    characters other than letters and digits becomes a single hyphen.

    Example:
        slugify("Índice de Precios al Consumidor (IPC)")  # "indice-de-precios-al-consumidor-ipc"
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower().strip()).strip("-")


def generate_event_slug(name: str) -> str:
    """Stable identifier for an event, derived from its display name."""
    return slugify(name)


# =============================================================================
# Date Utilities
# =============================================================================

MONTH_DATE_LENGTH = len("YYYY-MM")


def complete_month_date(value: str) -> str:
    """
    Append the first day of month to a YYYY-MM string.

    Anything that is not exactly seven characters long is returned unchanged.

    Example:
        complete_month_date("2024-03")     # "2024-03-01"
        complete_month_date("2024-03-15")  # "2024-03-15"
    """
    if len(value) == MONTH_DATE_LENGTH:
        return f"{value}-01"
    return value


def parse_date_bound(value: str | None) -> str | None:
    """
    Normalize and validate a query date bound.

    Accepts YYYY-MM (completed to the first of the month) or YYYY-MM-DD.

    Returns:
        ISO date string, or None if no value was given

    Raises:
        ValueError: If the value is not a valid date
    """
    if value is None or value == "":
        return None
    normalized = complete_month_date(value.strip())
    return datetime.strptime(normalized, "%Y-%m-%d").date().isoformat()


def shift_months(value: date, months: int) -> date:
    """Move a date by whole months, clamping the day to 1."""
    total = value.year * 12 + (value.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def pct_change(current: float | None, previous: float | None) -> float | None:
    """Percent change from previous to current, or None if not computable."""
    if current is None or not previous:
        return None
    return (current - previous) / previous * 100


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for errors raised outside the HTTP layer.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        status_code: HTTP status the API layer should answer with
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result
