"""Invention routes: list, detail, submit, status, comments and votes."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from inventhub.auth import get_current_user, require_admin
from inventhub.config import settings
from inventhub.db import Database
from inventhub.deps import get_db, get_file_storage
from inventhub.errors import NotFoundError, ValidationError
from inventhub.models.comment import CommentWithAuthor, CreateCommentRequest
from inventhub.models.invention import (
    CreateInventionRequest,
    Invention,
    InventionDetail,
    InventionFilters,
    InventionSummary,
    StatusUpdateRequest,
)
from inventhub.models.like import Like, ToggleLikeRequest, ToggleLikeResponse
from inventhub.models.user import User
from inventhub.repos import comment_repo, file_repo, invention_repo, like_repo
from inventhub.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inventions", tags=["inventions"])


def parse_tags_field(raw: str | None) -> list[str]:
    """
    Tags arrive from the submission form either as a JSON array
    or as a comma-joined string.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return raw.split(",")
    if isinstance(parsed, list) and all(isinstance(t, str) for t in parsed):
        return parsed
    if isinstance(parsed, str):
        return parsed.split(",")
    raise ValidationError("Tags must be a list of strings.")


@router.get("", status_code=200)
async def list_inventions(
    status_filter: str | None = Query(None, alias="status"),
    tags: str | None = Query(None, description="Comma-joined tags, matches any"),
    db: Database = Depends(get_db),
) -> list[InventionSummary]:
    """List inventions with author and counts, newest first."""
    filters = InventionFilters.from_query(status=status_filter, tags=tags)
    async with db.transaction() as conn:
        return await invention_repo.list_inventions(conn, filters)


@router.get("/{invention_id}", status_code=200)
async def get_invention(
    invention_id: int,
    db: Database = Depends(get_db),
) -> InventionDetail:
    """Get one invention with files, comments and likes."""
    async with db.transaction() as conn:
        detail = await invention_repo.get_invention_detail(conn, invention_id)
    if not detail:
        raise NotFoundError("Invention not found.")
    return detail


@router.post("", status_code=201)
async def create_invention(
    title: str = Form(...),
    description: str = Form(...),
    tags: str | None = Form(None),
    files: list[UploadFile] | None = File(None),
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> Invention:
    """Submit a new invention with optional attachments."""
    try:
        req = CreateInventionRequest(title=title, description=description, tags=parse_tags_field(tags))
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid invention: {e.errors()[0]['msg']}") from e

    uploads = files or []
    if len(uploads) > settings.MAX_FILES_PER_INVENTION:
        raise ValidationError(f"At most {settings.MAX_FILES_PER_INVENTION} files per invention.")

    stored = []
    try:
        for upload in uploads:
            stored.append(await storage.save(upload))
        async with db.transaction() as conn:
            invention = await invention_repo.create_invention(conn, user.id, req)
            for info in stored:
                await file_repo.save_file_info(conn, invention.id, info)
    except Exception:
        for info in stored:
            await storage.delete(info.filename)
        raise
    return invention


@router.delete("/{invention_id}", status_code=204)
async def delete_invention(
    invention_id: int,
    admin: User = Depends(require_admin),
    db: Database = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> Response:
    """Delete an invention and everything attached to it. Admin only."""
    async with db.transaction() as conn:
        attached = await file_repo.list_for_invention(conn, invention_id)
        deleted = await invention_repo.delete_invention(conn, invention_id)
    if not deleted:
        raise NotFoundError("Invention not found.")
    for info in attached:
        await storage.delete(info.filename)
    logger.info("Invention %s deleted by %s", invention_id, admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{invention_id}/status", status_code=200)
async def update_status(
    invention_id: int,
    req: StatusUpdateRequest,
    admin: User = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Invention:
    """Approve, reject or otherwise re-status an invention. Admin only."""
    async with db.transaction() as conn:
        invention = await invention_repo.set_status(conn, invention_id, req.status, req.funding_amount)
    if not invention:
        raise NotFoundError("Invention not found.")
    return invention


@router.get("/{invention_id}/comments", status_code=200)
async def list_comments(
    invention_id: int,
    db: Database = Depends(get_db),
) -> list[CommentWithAuthor]:
    """List comments on an invention, newest first."""
    async with db.transaction() as conn:
        if await invention_repo.get_invention(conn, invention_id) is None:
            raise NotFoundError("Invention not found.")
        return await comment_repo.list_for_invention(conn, invention_id)


@router.post("/{invention_id}/comments", status_code=201)
async def create_comment(
    invention_id: int,
    req: CreateCommentRequest,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> CommentWithAuthor:
    """Comment on an invention."""
    async with db.transaction() as conn:
        return await comment_repo.create_comment(conn, invention_id, user.id, req.content)


@router.post("/{invention_id}/like", status_code=200)
async def toggle_like(
    invention_id: int,
    req: ToggleLikeRequest,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> ToggleLikeResponse:
    """Like or dislike. Repeating a vote retracts it; the opposite vote flips it."""
    async with db.transaction() as conn:
        vote = await like_repo.toggle_like(conn, invention_id, user.id, req.is_like)
    return ToggleLikeResponse(vote=vote)


@router.get("/{invention_id}/user-like", status_code=200)
async def get_user_like(
    invention_id: int,
    user: User = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Like | None:
    """The current user's vote row on this invention, or null."""
    async with db.transaction() as conn:
        if await invention_repo.get_invention(conn, invention_id) is None:
            raise NotFoundError("Invention not found.")
        return await like_repo.get_user_like(conn, invention_id, user.id)
