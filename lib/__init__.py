# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - api_client.py: httpx client for the public API routes
# - utils.py: Shared utilities (slugs, date bounds, base error)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.api_client import APIRequestError, ArgenStatsAPIClient, build_sector_params
from lib.utils import (
    ApplicationError,
    complete_month_date,
    generate_event_slug,
    parse_date_bound,
    slugify,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # API client
    "APIRequestError",
    "ArgenStatsAPIClient",
    "build_sector_params",
    # Utils
    "ApplicationError",
    "complete_month_date",
    "generate_event_slug",
    "parse_date_bound",
    "slugify",
]
