# =============================================================================
# core/services/api_key_service.py - Per-User API Keys
# =============================================================================
# Each user row carries one API key, issued on user.created. Users can read
# it and replace it with a new one. A signed-in user whose webhook has not
# arrived yet gets a row created on first regeneration.
# =============================================================================

import logging
from datetime import datetime

from core.models.account import ApiKeyResponse
from core.services.user_sync_service import FREE_PLAN
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class ApiKeyService:
    """Service for reading and rotating a user's API key."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def get_api_key(self, clerk_user_id: str) -> ApiKeyResponse:
        """The stored key; None for unknown users or users without one."""
        row = self.db.fetch_user(clerk_user_id)
        return ApiKeyResponse(api_key=row.get("api_key") if row else None)

    def regenerate_api_key(self, clerk_user_id: str, email: str | None = None) -> ApiKeyResponse:
        """
        Replace the user's key with a freshly generated one.

        Raises:
            SupabaseClientError: If the database returns no key
        """
        if not self.db.fetch_user(clerk_user_id):
            logger.info(f"Creating missing user {clerk_user_id} before issuing a key")
            self.db.insert_user({
                "clerk_user_id": clerk_user_id,
                "email": email,
                "subscription_status": FREE_PLAN,
            })

        api_key = self.db.generate_api_key()
        if not api_key:
            raise SupabaseClientError(
                message="Failed to generate API key: no key returned",
                code="API_KEY_GENERATION_FAILED",
            )

        self.db.update_user(clerk_user_id, {
            "api_key": api_key,
            "updated_at": datetime.utcnow().isoformat(),
        })
        logger.info(f"Issued a new API key for user {clerk_user_id}")
        return ApiKeyResponse(api_key=api_key)
