# =============================================================================
# app/routers/favorites.py - User Favorites Endpoints
# =============================================================================
# Mounted at /api/user/favorites.
#
# GET / POST / DELETE require a Clerk session (401 otherwise).
# POST /toggle accepts anonymous callers and does nothing for them.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.dependencies import DatabaseDep
from core.models.account import Favorite, FavoriteList, FavoriteRequest, FavoriteToggleResponse
from core.services.favorite_service import FavoriteService

router = APIRouter()


class FavoriteCreateResponse(BaseModel):
    favorite: Favorite


class FavoriteDeleteResponse(BaseModel):
    success: bool = True


@router.get("", response_model=FavoriteList)
async def list_favorites(
    db: DatabaseDep,
    user: AuthUser = Depends(get_current_user),
):
    """The caller's favorites, newest first."""
    return FavoriteList(favorites=FavoriteService(db).list_favorites(user.id))


@router.post("", response_model=FavoriteCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_favorite(
    db: DatabaseDep,
    request: FavoriteRequest,
    user: AuthUser = Depends(get_current_user),
):
    """Add a favorite; 409 if it already exists."""
    favorite = FavoriteService(db).add_favorite(user.id, request.indicator_type, request.indicator_id)
    return FavoriteCreateResponse(favorite=favorite)


@router.delete("", response_model=FavoriteDeleteResponse)
async def remove_favorite(
    db: DatabaseDep,
    indicator_type: Annotated[str, Query(min_length=1)],
    indicator_id: str | None = None,
    user: AuthUser = Depends(get_current_user),
):
    """Remove a favorite. Removing a missing favorite is not an error."""
    FavoriteService(db).remove_favorite(user.id, indicator_type, indicator_id)
    return FavoriteDeleteResponse()


@router.post("/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    db: DatabaseDep,
    request: FavoriteRequest,
    user: AuthUser | None = Depends(get_current_user_optional),
):
    """
    Flip a favorite on or off.

    Anonymous callers get {"authenticated": false} and nothing changes.
    """
    return FavoriteService(db).toggle_favorite(
        user.id if user else None,
        request.indicator_type,
        request.indicator_id,
    )
