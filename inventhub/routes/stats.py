"""Dashboard statistics route."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from inventhub.db import Database
from inventhub.deps import get_db
from inventhub.models.invention import Stats
from inventhub.repos import invention_repo

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", status_code=200)
async def get_stats(db: Database = Depends(get_db)) -> Stats:
    """Invention totals by status."""
    async with db.connection() as conn:
        return await invention_repo.get_stats(conn)
