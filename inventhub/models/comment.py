"""Comment models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from inventhub.models.base import CamelModel
from inventhub.models.user import UserPublic


class Comment(CamelModel):
    """Represents a row in the comments table. Immutable once created."""

    id: int
    content: str
    invention_id: int
    author_id: str
    created_at: datetime


class CommentWithAuthor(Comment):
    author: UserPublic


class CreateCommentRequest(BaseModel):
    """What the client sends to comment on an invention."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(min_length=1, max_length=10000)
