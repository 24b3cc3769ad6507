# =============================================================================
# app/routers/user.py - User Account Endpoints
# =============================================================================
# Mounted at /api/user. Both endpoints require a Clerk session.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from app.dependencies import DatabaseDep
from core.models.account import ApiKeyResponse
from core.services.api_key_service import ApiKeyService

router = APIRouter()


@router.get("/api-key", response_model=ApiKeyResponse)
async def get_api_key(
    db: DatabaseDep,
    user: AuthUser = Depends(get_current_user),
):
    """The caller's API key, or null if none was issued."""
    return ApiKeyService(db).get_api_key(user.id)


@router.post("/api-key", response_model=ApiKeyResponse)
async def regenerate_api_key(
    db: DatabaseDep,
    user: AuthUser = Depends(get_current_user),
):
    """Issue a new API key; the previous one stops working."""
    return ApiKeyService(db).regenerate_api_key(user.id, user.email)
