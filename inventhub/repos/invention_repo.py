"""
Invention repository: creation, aggregated listing, detail, status changes
and statistics.

Every function takes an open connection; the caller owns the transaction.
"""

from __future__ import annotations

import logging

from asyncpg import Connection, Record

from inventhub.errors import NotFoundError, ValidationError
from inventhub.models.comment import CommentWithAuthor
from inventhub.models.file import InventionFile
from inventhub.models.invention import (
    INVENTION_STATUSES,
    CreateInventionRequest,
    EngagementCounts,
    Invention,
    InventionDetail,
    InventionFilters,
    InventionSummary,
    Stats,
)
from inventhub.models.like import Like
from inventhub.models.user import UserPublic

logger = logging.getLogger(__name__)

_INVENTION_COLUMNS = """
    i.id, i.title, i.description, i.tags, i.status, i.funding_amount,
    i.author_id, i.created_at, i.updated_at,
    u.email AS author_email,
    u.first_name AS author_first_name,
    u.last_name AS author_last_name,
    u.profile_image_url AS author_profile_image_url,
    u.role AS author_role
"""

# Each child table is grouped on its own before the join, so one
# invention's likes never multiply against its comments or files.
# The author join is INNER: an invention without an author is never listed.
_LIST_SQL = f"""
    SELECT {_INVENTION_COLUMNS},
        COALESCE(l.likes, 0) AS like_count,
        COALESCE(l.dislikes, 0) AS dislike_count,
        COALESCE(c.total, 0) AS comment_count,
        COALESCE(f.total, 0) AS file_count
    FROM inventions i
    JOIN users u ON u.id = i.author_id
    LEFT JOIN (
        SELECT invention_id,
            count(*) FILTER (WHERE is_like) AS likes,
            count(*) FILTER (WHERE NOT is_like) AS dislikes
        FROM likes
        GROUP BY invention_id
    ) l ON l.invention_id = i.id
    LEFT JOIN (
        SELECT invention_id, count(*) AS total
        FROM comments
        GROUP BY invention_id
    ) c ON c.invention_id = i.id
    LEFT JOIN (
        SELECT invention_id, count(*) AS total
        FROM files
        GROUP BY invention_id
    ) f ON f.invention_id = i.id
    WHERE ($1::text IS NULL OR i.status = $1::text)
      AND ($2::text[] IS NULL OR i.tags && $2::text[])
    ORDER BY i.created_at DESC, i.id DESC
"""


def _row_to_invention(row: Record) -> Invention:
    """Convert a database row to an Invention model."""
    return Invention(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        tags=list(row["tags"]),
        status=row["status"],
        funding_amount=row["funding_amount"],
        author_id=row["author_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_author(row: Record, prefix: str = "author_") -> UserPublic:
    """Pull the joined author columns out of a row."""
    return UserPublic(
        id=row[f"{prefix}id"],
        email=row[f"{prefix}email"],
        first_name=row[f"{prefix}first_name"],
        last_name=row[f"{prefix}last_name"],
        profile_image_url=row[f"{prefix}profile_image_url"],
        role=row[f"{prefix}role"],
    )


def _row_to_summary(row: Record) -> InventionSummary:
    return InventionSummary(
        **_row_to_invention(row).model_dump(),
        author=_row_to_author(row),
        counts=EngagementCounts(
            likes=row["like_count"],
            dislikes=row["dislike_count"],
            comments=row["comment_count"],
            files=row["file_count"],
        ),
    )


async def create_invention(conn: Connection, author_id: str, req: CreateInventionRequest) -> Invention:
    """
    Create a new invention in pending status with no funding.

    Args:
        conn: Open connection
        author_id: Submitting user's id
        req: Title, description and tags

    Returns:
        Newly created Invention
    """
    row = await conn.fetchrow(
        """
        INSERT INTO inventions (title, description, tags, author_id)
        VALUES ($1, $2, $3, $4)
        RETURNING *
        """,
        req.title,
        req.description,
        req.tags,
        author_id,
    )
    logger.info("Invention %s created by %s", row["id"], author_id)
    return _row_to_invention(row)


async def get_invention(conn: Connection, invention_id: int) -> Invention | None:
    """Get the bare invention row, without author or children."""
    row = await conn.fetchrow("SELECT * FROM inventions WHERE id = $1", invention_id)
    return _row_to_invention(row) if row else None


async def lock_invention(conn: Connection, invention_id: int) -> None:
    """
    Take a key-share lock on an invention so it cannot be deleted
    while a child row is written for it.

    Raises:
        NotFoundError: No invention with this id
    """
    found = await conn.fetchval(
        "SELECT id FROM inventions WHERE id = $1 FOR KEY SHARE",
        invention_id,
    )
    if found is None:
        raise NotFoundError("Invention not found.")


async def list_inventions(conn: Connection, filters: InventionFilters | None = None) -> list[InventionSummary]:
    """
    List inventions with author and engagement counts, newest first.

    One statement regardless of how many inventions match.

    Args:
        conn: Open connection
        filters: Optional status (exact) and tags (any overlap)

    Returns:
        List of InventionSummary ordered by created_at DESC
    """
    filters = filters or InventionFilters()
    tags = list(filters.tags) if filters.tags else None
    rows = await conn.fetch(_LIST_SQL, filters.status, tags)
    return [_row_to_summary(row) for row in rows]


async def get_invention_detail(conn: Connection, invention_id: int) -> InventionDetail | None:
    """
    Get one invention with author, files, comments (with authors) and likes.

    Args:
        conn: Open connection
        invention_id: Invention id

    Returns:
        InventionDetail, or None if the invention does not exist
    """
    row = await conn.fetchrow(
        f"""
        SELECT {_INVENTION_COLUMNS}
        FROM inventions i
        JOIN users u ON u.id = i.author_id
        WHERE i.id = $1
        """,
        invention_id,
    )
    if not row:
        return None

    file_rows = await conn.fetch(
        "SELECT * FROM files WHERE invention_id = $1 ORDER BY uploaded_at, id",
        invention_id,
    )
    comment_rows = await conn.fetch(
        """
        SELECT c.id, c.content, c.invention_id, c.author_id, c.created_at,
            u.email AS author_email,
            u.first_name AS author_first_name,
            u.last_name AS author_last_name,
            u.profile_image_url AS author_profile_image_url,
            u.role AS author_role
        FROM comments c
        JOIN users u ON u.id = c.author_id
        WHERE c.invention_id = $1
        ORDER BY c.created_at DESC, c.id DESC
        """,
        invention_id,
    )
    like_rows = await conn.fetch(
        "SELECT * FROM likes WHERE invention_id = $1 ORDER BY created_at, id",
        invention_id,
    )

    return InventionDetail(
        **_row_to_invention(row).model_dump(),
        author=_row_to_author(row),
        files=[InventionFile(**dict(r)) for r in file_rows],
        comments=[
            CommentWithAuthor(
                id=r["id"],
                content=r["content"],
                invention_id=r["invention_id"],
                author_id=r["author_id"],
                created_at=r["created_at"],
                author=_row_to_author(r),
            )
            for r in comment_rows
        ],
        likes=[Like(**dict(r)) for r in like_rows],
    )


async def set_status(
    conn: Connection,
    invention_id: int,
    status: str,
    funding_amount: int | None = None,
) -> Invention | None:
    """
    Move an invention to a new status. Admin-only; the caller checks the role.

    Any status may move to any other. Funding is only kept on approved
    inventions: approving with an amount stores it, approving without one
    keeps whatever was there (nothing, for a first approval), and every
    other status clears it.

    Args:
        conn: Open connection
        invention_id: Invention id
        status: Target status
        funding_amount: Optional non-negative amount, approvals only

    Returns:
        Updated Invention, or None if not found

    Raises:
        ValidationError: Unknown status, negative amount, or amount on a non-approval
    """
    if status not in INVENTION_STATUSES:
        raise ValidationError(f"Unknown status '{status}'.")
    if funding_amount is not None:
        if funding_amount < 0:
            raise ValidationError("Funding amount must not be negative.")
        if status != "approved":
            raise ValidationError("Funding amount can only be set when approving.")

    row = await conn.fetchrow(
        """
        UPDATE inventions
        SET status = $2::text,
            funding_amount = CASE
                WHEN $2::text = 'approved' THEN COALESCE($3::integer, funding_amount)
                ELSE NULL
            END,
            updated_at = now()
        WHERE id = $1
        RETURNING *
        """,
        invention_id,
        status,
        funding_amount,
    )
    if not row:
        return None

    invention = _row_to_invention(row)
    logger.info(
        "Invention %s status -> %s (funding=%s)",
        invention.id,
        invention.status,
        invention.funding_amount,
    )
    if invention.status == "approved" and invention.funding_amount is None:
        logger.warning("Invention %s approved without a funding amount", invention.id)
    return invention


async def delete_invention(conn: Connection, invention_id: int) -> bool:
    """
    Delete an invention. Files, comments and likes go with it (ON DELETE CASCADE).

    Returns:
        True if deleted, False if not found
    """
    result = await conn.execute("DELETE FROM inventions WHERE id = $1", invention_id)
    # result is a string like "DELETE 1" or "DELETE 0"
    return result == "DELETE 1"


async def get_stats(conn: Connection) -> Stats:
    """Count inventions overall and per status in one aggregate query."""
    row = await conn.fetchrow(
        """
        SELECT
            count(*) AS total,
            count(*) FILTER (WHERE status = 'pending') AS pending,
            count(*) FILTER (WHERE status = 'approved') AS approved,
            count(*) FILTER (WHERE status = 'rejected') AS rejected
        FROM inventions
        """
    )
    return Stats(**dict(row))
