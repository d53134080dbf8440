"""Like/dislike vote models."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict

from inventhub.models.base import CamelModel


class Like(CamelModel):
    """Represents a row in the likes table. is_like False means dislike."""

    id: int
    invention_id: int
    user_id: str
    is_like: bool
    created_at: datetime


class ToggleLikeRequest(CamelModel):
    """What the client sends to like (true) or dislike (false)."""

    model_config = ConfigDict(extra="forbid")

    is_like: bool


class ToggleLikeResponse(CamelModel):
    """Resulting vote: True liked, False disliked, None no vote."""

    success: bool = True
    vote: bool | None
