# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Clerk session token.

    `id` is the Clerk user id ("user_..."), not the internal users.id;
    services resolve it when they need the database row.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None
