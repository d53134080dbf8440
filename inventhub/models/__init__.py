"""
Pydantic models for InventHub.

All data shapes defined here. No imports from db, repos, or routes.
"""

from inventhub.models.comment import Comment, CommentWithAuthor, CreateCommentRequest
from inventhub.models.file import InventionFile, StoredFile
from inventhub.models.invention import (
    CreateInventionRequest,
    EngagementCounts,
    Invention,
    InventionDetail,
    InventionFilters,
    InventionSummary,
    Stats,
    StatusUpdateRequest,
)
from inventhub.models.like import Like, ToggleLikeRequest, ToggleLikeResponse
from inventhub.models.user import UpsertUserRequest, User, UserPublic

__all__ = [
    # User models
    "User",
    "UserPublic",
    "UpsertUserRequest",
    # Invention models
    "Invention",
    "InventionSummary",
    "InventionDetail",
    "InventionFilters",
    "EngagementCounts",
    "CreateInventionRequest",
    "StatusUpdateRequest",
    "Stats",
    # Child models
    "InventionFile",
    "StoredFile",
    "Comment",
    "CommentWithAuthor",
    "CreateCommentRequest",
    "Like",
    "ToggleLikeRequest",
    "ToggleLikeResponse",
]
