"""User models. Identity comes from the external auth provider."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from inventhub.models.base import CamelModel

Role = Literal["user", "faculty", "admin"]


class User(BaseModel):
    """Core user model. Represents a row in the users table."""

    id: str
    email: EmailStr | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    role: Role = "user"
    created_at: datetime
    updated_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserPublic(CamelModel):
    """What the API returns when a user is embedded in another payload."""

    id: str
    email: EmailStr | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    role: Role

    @classmethod
    def from_user(cls, user: User) -> UserPublic:
        """Convert internal User model to public API response."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
            role=user.role,
        )


class UpsertUserRequest(BaseModel):
    """Identity claims pushed by the auth provider on login."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1, max_length=255)
    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)
    profile_image_url: str | None = None
    # None keeps the stored role; new users default to "user"
    role: Role | None = None
