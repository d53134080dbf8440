"""Invention models: records, aggregated views, requests and list filters."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from inventhub.errors import ValidationError
from inventhub.models.base import CamelModel
from inventhub.models.comment import CommentWithAuthor
from inventhub.models.file import InventionFile
from inventhub.models.like import Like
from inventhub.models.user import UserPublic

InventionStatus = Literal["pending", "under_review", "approved", "rejected"]
INVENTION_STATUSES: tuple[str, ...] = get_args(InventionStatus)


def normalize_tags(tags: list[str]) -> list[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


class Invention(CamelModel):
    """Core invention model. Represents a row in the inventions table."""

    id: int
    title: str
    description: str
    tags: list[str] = Field(default_factory=list)
    status: InventionStatus = "pending"
    funding_amount: int | None = None
    author_id: str
    created_at: datetime
    updated_at: datetime


class EngagementCounts(CamelModel):
    """Derived per-invention counts. Never stored on the invention row."""

    likes: int = 0
    dislikes: int = 0
    comments: int = 0
    files: int = 0


class InventionSummary(Invention):
    """List-view row: invention plus author and engagement counts."""

    author: UserPublic
    counts: EngagementCounts = Field(default_factory=EngagementCounts, alias="_count")


class InventionDetail(Invention):
    """Full invention with every child collection."""

    author: UserPublic
    files: list[InventionFile] = Field(default_factory=list)
    comments: list[CommentWithAuthor] = Field(default_factory=list)
    likes: list[Like] = Field(default_factory=list)


class Stats(CamelModel):
    """Status counts over all inventions."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class CreateInventionRequest(BaseModel):
    """What the submission form sends (files travel separately)."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)


class StatusUpdateRequest(CamelModel):
    """What an admin sends to move an invention to a new status."""

    model_config = ConfigDict(extra="forbid")

    status: InventionStatus
    funding_amount: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _funding_requires_approval(self) -> StatusUpdateRequest:
        if self.funding_amount is not None and self.status != "approved":
            raise ValueError("fundingAmount can only be set when approving")
        return self


class InventionFilters(BaseModel):
    """
    Filters for the list view.

    status: exact match; None means every status.
    tags: overlap match (any shared tag); None or empty means no restriction.
    """

    model_config = ConfigDict(frozen=True)

    status: InventionStatus | None = None
    tags: tuple[str, ...] | None = None

    @classmethod
    def from_query(cls, status: str | None = None, tags: str | None = None) -> InventionFilters:
        """
        Build filters from raw query parameters.

        Args:
            status: status name, or empty/None for all
            tags: comma-joined tag list, e.g. "AI/ML,IoT"

        Raises:
            ValidationError: status is not a known invention status
        """
        status = (status or "").strip() or None
        if status is not None and status not in INVENTION_STATUSES:
            raise ValidationError(f"Unknown status '{status}'.")
        tag_list = normalize_tags(tags.split(",")) if tags else []
        return cls(status=status, tags=tuple(tag_list) or None)
