# =============================================================================
# core/services/favorite_service.py - User Favorites
# =============================================================================
# Favorites are keyed by (user, indicator_type, indicator_id). Callers pass
# the Clerk user id; it is resolved to the internal users.id before every
# read or write.
#
# Toggling is read-then-write with no locking, so concurrent toggles from
# the same user are last-write-wins.
# =============================================================================

import logging

from app.exceptions import FavoriteExistsError, UserNotFoundError
from core.models.account import Favorite, FavoriteToggleResponse
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class FavoriteService:
    """Service for a user's favorite indicators."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def _resolve_user(self, clerk_user_id: str) -> str:
        user_id = self.db.fetch_user_id(clerk_user_id)
        if not user_id:
            raise UserNotFoundError(clerk_user_id)
        return user_id

    def list_favorites(self, clerk_user_id: str) -> list[Favorite]:
        user_id = self._resolve_user(clerk_user_id)
        return [Favorite(**row) for row in self.db.list_favorites(user_id)]

    def add_favorite(
        self,
        clerk_user_id: str,
        indicator_type: str,
        indicator_id: str | None = None,
    ) -> Favorite:
        """
        Add a favorite.

        Raises:
            UserNotFoundError: If the user has not been synced yet
            FavoriteExistsError: If the favorite is already present
        """
        user_id = self._resolve_user(clerk_user_id)
        row = self.db.insert_favorite(user_id, indicator_type, indicator_id or None)
        if row is None:
            raise FavoriteExistsError(indicator_type, indicator_id)
        return Favorite(**row)

    def remove_favorite(
        self,
        clerk_user_id: str,
        indicator_type: str,
        indicator_id: str | None = None,
    ) -> None:
        user_id = self._resolve_user(clerk_user_id)
        self.db.delete_favorite(user_id, indicator_type, indicator_id or None)

    def toggle_favorite(
        self,
        clerk_user_id: str | None,
        indicator_type: str,
        indicator_id: str | None = None,
    ) -> FavoriteToggleResponse:
        """
        Flip membership of a favorite.

        Anonymous callers (clerk_user_id None) get authenticated=False and
        nothing is read or written.
        """
        if not clerk_user_id:
            return FavoriteToggleResponse(authenticated=False)

        indicator_id = indicator_id or None
        user_id = self._resolve_user(clerk_user_id)
        existing = self.db.find_favorite(user_id, indicator_type, indicator_id)

        if existing:
            self.db.delete_favorite(user_id, indicator_type, indicator_id)
            is_favorite = False
        else:
            # A concurrent insert may have won; either way it is now a favorite
            self.db.insert_favorite(user_id, indicator_type, indicator_id)
            is_favorite = True

        logger.debug(f"Toggled favorite {indicator_type}/{indicator_id} for {clerk_user_id}: {is_favorite}")
        return FavoriteToggleResponse(
            authenticated=True,
            is_favorite=is_favorite,
            indicator_type=indicator_type,
            indicator_id=indicator_id,
        )
