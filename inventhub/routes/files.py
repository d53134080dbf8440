"""Attachment download route."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from inventhub.db import Database
from inventhub.deps import get_db, get_file_storage
from inventhub.errors import NotFoundError
from inventhub.repos import file_repo
from inventhub.services.file_storage import LocalFileStorage

router = APIRouter(prefix="/api/files", tags=["files"])


@router.get("/{filename}")
async def download_file(
    filename: str,
    db: Database = Depends(get_db),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> FileResponse:
    """Download an attachment under its original name."""
    async with db.connection() as conn:
        info = await file_repo.get_by_filename(conn, filename)
    if not info:
        raise NotFoundError("File not found.")
    return FileResponse(
        str(storage.path_for(info.filename)),
        media_type=info.mime_type,
        filename=info.original_name,
    )
