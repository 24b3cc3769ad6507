# =============================================================================
# core/models/account.py - Favorites & Identity Webhook Schemas
# =============================================================================
# Favorites are keyed by (user, indicator_type, indicator_id). A favorite
# exists only after the user's first toggle or add.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class FavoriteRequest(BaseModel):
    """Body for adding or toggling a favorite."""
    indicator_type: str = Field(..., min_length=1, examples=["emae"])
    indicator_id: str | None = Field(default=None, examples=["A"])


class Favorite(BaseModel):
    id: Any = None
    indicator_type: str
    indicator_id: str | None = None
    created_at: str | None = None


class FavoriteList(BaseModel):
    favorites: list[Favorite]


class FavoriteToggleResponse(BaseModel):
    """
    Result of a toggle.

    `authenticated` is False when the caller had no session; in that case
    nothing was read or written.
    """
    authenticated: bool
    is_favorite: bool = False
    indicator_type: str | None = None
    indicator_id: str | None = None


class ApiKeyResponse(BaseModel):
    """The caller's API key; None until one has been issued."""
    api_key: str | None = None


class ClerkEvent(BaseModel):
    """Webhook envelope sent by Clerk (via svix)."""
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
