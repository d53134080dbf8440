"""
Authentication and authorization for InventHub.

Login itself happens at the external identity provider; this module only
issues and verifies session JWTs and loads the user row (with its role).
Role claims are trusted as stored; nothing here re-derives them.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Cookie, Depends, Header, HTTPException, status

from inventhub import config
from inventhub.db import Database
from inventhub.deps import get_db
from inventhub.errors import ForbiddenError
from inventhub.models.user import User
from inventhub.repos import user_repo


def create_jwt(user_id: str) -> str:
    """
    Create a JWT for a user session.

    Args:
        user_id: Opaque user id to encode in the token

    Returns:
        Signed JWT string
    """
    expires_at = datetime.now(UTC) + timedelta(hours=config.settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": user_id,
        "exp": expires_at,
        "iat": datetime.now(UTC),
    }
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        ) from e


def _token_from_request(session: str | None, authorization: str | None) -> str | None:
    if authorization and authorization.startswith("Bearer "):
        return authorization.removeprefix("Bearer ").strip()
    return session


async def _load_user(db: Database, token: str) -> User:
    payload = decode_jwt(token)
    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        )

    async with db.connection() as conn:
        user = await user_repo.get_user(conn, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found. Please sign in again.",
        )
    return user


async def get_current_user(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
    db: Database = Depends(get_db),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Tries the Bearer header first, then the session cookie.

    Raises:
        HTTPException: 401 if authentication fails
    """
    token = _token_from_request(session, authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please sign in.",
        )
    return await _load_user(db, token)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency for admin-only operations.

    Raises:
        ForbiddenError: The authenticated user is not an admin
    """
    if not user.is_admin:
        raise ForbiddenError("Access denied. Admin role required.")
    return user
