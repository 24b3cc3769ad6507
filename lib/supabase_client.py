# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# One instance is created by the application lifespan (or by a worker task)
# and handed to services explicitly, so nothing here is process-global.
#
# It provides:
# - Query execution with consistent error wrapping
# - Helpers for "first row" and "date range" lookups on indicator tables
# - Typed methods for the account tables (users, user_favorites)
# - Cron execution logging
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   db = SupabaseClient.from_settings()
#   rows = db.run(db.table("dollar_rates").select("*").limit(5), "fetch dollar rates")
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code for unique constraint violations
UNIQUE_VIOLATION = "23505"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries an HTTP status so the API layer can render it like any other
    application error.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        status_code: int = 503,
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
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    The underlying supabase-py client is created lazily on first use. All
    queries go through run() so failures surface as SupabaseClientError.

    Example:
        db = SupabaseClient(url, service_role_key)
        latest = db.fetch_first(
            db.table("emae_with_variations").select("*").order("date", desc=True),
            "fetch latest EMAE",
        )
    """

    def __init__(self, url: str, key: str):
        self._url = url
        self._key = key
        self._client: Client | None = None

    @classmethod
    def from_settings(cls) -> "SupabaseClient":
        """Build a client from SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."""
        return cls(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)

    def get_client(self) -> Client:
        """
        Get or create the Supabase client.

        Uses the service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(self._url, self._key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in your .env file"
                )
        return self._client

    def table(self, name: str):
        """Start a query builder on a table or view."""
        return self.get_client().table(name)

    # -------------------------------------------------------------------------
    # Query Execution
    # -------------------------------------------------------------------------

    def execute(self, query, operation: str):
        """
        Execute a query builder and return the raw APIResponse.

        Args:
            query: A supabase-py query builder
            operation: Short description used in error messages

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"Supabase query failed ({operation}): {e}")
            raise SupabaseClientError(
                message=f"Failed to {operation}: {e}",
                code="QUERY_FAILED",
                suggestion="Try again later; the data store may be temporarily unavailable",
                details={"operation": operation},
            )

    def run(self, query, operation: str) -> list[dict[str, Any]]:
        """Execute a query and return its rows (never None)."""
        response = self.execute(query, operation)
        return response.data or []

    def fetch_first(self, query, operation: str) -> dict[str, Any] | None:
        """Execute a query limited to one row and return it, or None."""
        rows = self.run(query.limit(1), operation)
        return rows[0] if rows else None

    def fetch_date_bounds(
        self,
        table: str,
        date_column: str = "date",
    ) -> tuple[str | None, str | None]:
        """
        Get the first and last date available in a table.

        Returns:
            Tuple of (first_date, last_date); both None for an empty table
        """
        first = self.fetch_first(
            self.table(table).select(date_column).order(date_column),
            f"fetch first date from {table}",
        )
        last = self.fetch_first(
            self.table(table).select(date_column).order(date_column, desc=True),
            f"fetch last date from {table}",
        )
        return (
            first.get(date_column) if first else None,
            last.get(date_column) if last else None,
        )

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def fetch_user_id(self, clerk_user_id: str) -> str | None:
        """
        Resolve a Clerk user ID to the internal users.id.

        Returns:
            The internal user UUID as string, or None if the user is unknown
        """
        row = self.fetch_first(
            self.table("users").select("id").eq("clerk_user_id", clerk_user_id),
            "fetch user",
        )
        return str(row["id"]) if row else None

    def fetch_user(self, clerk_user_id: str) -> dict[str, Any] | None:
        """Fetch the id and API key of a user, or None if the user is unknown."""
        return self.fetch_first(
            self.table("users").select("id, api_key").eq("clerk_user_id", clerk_user_id),
            "fetch user",
        )

    def generate_api_key(self) -> str | None:
        """Ask the database to generate a fresh API key for a new user."""
        response = self.execute(
            self.get_client().rpc("generate_api_key", {}),
            "generate API key",
        )
        return response.data

    def insert_user(self, data: dict[str, Any]) -> dict[str, Any] | None:
        rows = self.run(self.table("users").insert(data), "create user")
        return rows[0] if rows else None

    def update_user(self, clerk_user_id: str, data: dict[str, Any]) -> None:
        self.run(
            self.table("users").update(data).eq("clerk_user_id", clerk_user_id),
            "update user",
        )

    def delete_user(self, clerk_user_id: str) -> None:
        self.run(
            self.table("users").delete().eq("clerk_user_id", clerk_user_id),
            "delete user",
        )

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def insert_event(self, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert an event.

        Returns:
            The created row (or the submitted data when nothing is echoed
            back), or None if an event with the same slug already exists
        """
        try:
            rows = self.run(self.table("events").insert(data), "create event")
        except SupabaseClientError as e:
            if UNIQUE_VIOLATION in e.message:
                return None
            raise
        return rows[0] if rows else data

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    def list_favorites(self, user_id: str) -> list[dict[str, Any]]:
        """Fetch a user's favorites, newest first."""
        return self.run(
            self.table("user_favorites")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True),
            "fetch favorites",
        )

    def find_favorite(
        self,
        user_id: str,
        indicator_type: str,
        indicator_id: str | None,
    ) -> dict[str, Any] | None:
        """Find one favorite by its (user, type, id) key."""
        query = (
            self.table("user_favorites")
            .select("*")
            .eq("user_id", user_id)
            .eq("indicator_type", indicator_type)
        )
        query = query.eq("indicator_id", indicator_id) if indicator_id else query.is_("indicator_id", "null")
        return self.fetch_first(query, "fetch favorite")

    def insert_favorite(
        self,
        user_id: str,
        indicator_type: str,
        indicator_id: str | None,
    ) -> dict[str, Any] | None:
        """
        Insert a favorite.

        Returns:
            The created row, or None if the favorite already existed
        """
        data = {
            "user_id": user_id,
            "indicator_type": indicator_type,
            "indicator_id": indicator_id,
        }
        try:
            rows = self.run(self.table("user_favorites").insert(data), "add favorite")
        except SupabaseClientError as e:
            if UNIQUE_VIOLATION in e.message:
                return None
            raise
        return rows[0] if rows else None

    def delete_favorite(
        self,
        user_id: str,
        indicator_type: str,
        indicator_id: str | None,
    ) -> None:
        query = (
            self.table("user_favorites")
            .delete()
            .eq("user_id", user_id)
            .eq("indicator_type", indicator_type)
        )
        query = query.eq("indicator_id", indicator_id) if indicator_id else query.is_("indicator_id", "null")
        self.run(query, "remove favorite")

    # -------------------------------------------------------------------------
    # Cron Executions
    # -------------------------------------------------------------------------

    def log_cron_execution(self, status: str, results: dict[str, Any]) -> None:
        """
        Record a refresh job run. Failures are logged, not raised, so a
        broken log table never fails the job itself.
        """
        try:
            self.run(
                self.table("cron_executions").insert({
                    "execution_time": datetime.utcnow().isoformat(),
                    "status": status,
                    "results": results,
                }),
                "log cron execution",
            )
        except SupabaseClientError as e:
            logger.warning(f"Could not log cron execution: {e}")
