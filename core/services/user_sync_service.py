# =============================================================================
# core/services/user_sync_service.py - Clerk User Sync
# =============================================================================
# Mirrors Clerk user lifecycle events into the users table:
#   user.created -> insert with a freshly generated API key
#   user.updated -> update profile fields
#   user.deleted -> delete
# Other event types are logged and acknowledged.
# =============================================================================

import logging
from datetime import datetime
from typing import Any

from app.exceptions import InvalidQueryError
from core.models.account import ClerkEvent
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

FREE_PLAN = "free"


def primary_email(data: dict[str, Any]) -> str | None:
    addresses = data.get("email_addresses") or []
    return addresses[0].get("email_address") if addresses else None


def profile_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "email": primary_email(data),
        "first_name": data.get("first_name") or None,
        "last_name": data.get("last_name") or None,
        "image_url": data.get("image_url"),
    }


class UserSyncService:
    """Applies Clerk webhook events to the users table."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def handle_event(self, event: ClerkEvent) -> str:
        """
        Apply one event.

        Returns:
            A short description of what was done ("created", "ignored", ...)

        Raises:
            InvalidQueryError: If the event carries no user id
        """
        clerk_user_id = event.data.get("id")
        logger.info(f"Webhook event {event.type} for user {clerk_user_id}")

        if event.type == "user.created":
            if not clerk_user_id:
                raise InvalidQueryError("data.id", None, "the id of the created user")
            record = {
                "clerk_user_id": clerk_user_id,
                **profile_fields(event.data),
                "api_key": self.db.generate_api_key(),
                "subscription_status": FREE_PLAN,
            }
            self.db.insert_user(record)
            return "created"

        if event.type == "user.updated":
            self.db.update_user(clerk_user_id, {
                **profile_fields(event.data),
                "updated_at": datetime.utcnow().isoformat(),
            })
            return "updated"

        if event.type == "user.deleted":
            if not clerk_user_id:
                raise InvalidQueryError("data.id", None, "the id of the deleted user")
            self.db.delete_user(clerk_user_id)
            return "deleted"

        logger.info(f"Unhandled webhook event type: {event.type}")
        return "ignored"
