"""Session routes. Sign-in itself is handled by the identity provider."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from inventhub.auth import get_current_user
from inventhub.models.user import User, UserPublic

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/user", status_code=200)
async def get_me(user: User = Depends(get_current_user)) -> UserPublic:
    """Get the currently authenticated user, including their role."""
    return UserPublic.from_user(user)
