"""Attachment metadata models. Bytes live with the storage collaborator."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from inventhub.models.base import CamelModel


class StoredFile(BaseModel):
    """What the file storage hands back after writing an upload."""

    filename: str = Field(min_length=1, max_length=255)
    original_name: str = Field(min_length=1, max_length=255)
    mime_type: str = Field(min_length=1, max_length=100)
    size: int


class InventionFile(CamelModel):
    """Represents a row in the files table."""

    id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    invention_id: int
    uploaded_at: datetime
