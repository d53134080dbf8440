"""Comment repository. Comments are created once and never edited."""

from __future__ import annotations

from asyncpg import Connection, Record

from inventhub.errors import ValidationError
from inventhub.models.comment import CommentWithAuthor
from inventhub.models.user import UserPublic
from inventhub.repos import invention_repo

_SELECT_WITH_AUTHOR = """
    SELECT c.id, c.content, c.invention_id, c.author_id, c.created_at,
        u.email, u.first_name, u.last_name, u.profile_image_url, u.role
    FROM comments c
    JOIN users u ON u.id = c.author_id
"""


def _row_to_comment(row: Record) -> CommentWithAuthor:
    """Convert a comments-join-users row to a CommentWithAuthor model."""
    return CommentWithAuthor(
        id=row["id"],
        content=row["content"],
        invention_id=row["invention_id"],
        author_id=row["author_id"],
        created_at=row["created_at"],
        author=UserPublic(
            id=row["author_id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            profile_image_url=row["profile_image_url"],
            role=row["role"],
        ),
    )


async def create_comment(conn: Connection, invention_id: int, author_id: str, content: str) -> CommentWithAuthor:
    """
    Add a comment to an invention.

    Args:
        conn: Open connection
        invention_id: Invention being commented on
        author_id: Commenting user
        content: Comment text, must not be blank

    Returns:
        The new comment with its author

    Raises:
        ValidationError: Blank content
        NotFoundError: No invention with this id
    """
    content = content.strip()
    if not content:
        raise ValidationError("Comment content must not be empty.")
    await invention_repo.lock_invention(conn, invention_id)

    comment_id = await conn.fetchval(
        """
        INSERT INTO comments (content, invention_id, author_id)
        VALUES ($1, $2, $3)
        RETURNING id
        """,
        content,
        invention_id,
        author_id,
    )
    row = await conn.fetchrow(f"{_SELECT_WITH_AUTHOR} WHERE c.id = $1", comment_id)
    return _row_to_comment(row)


async def list_for_invention(conn: Connection, invention_id: int) -> list[CommentWithAuthor]:
    """List an invention's comments with authors, newest first."""
    rows = await conn.fetch(
        f"{_SELECT_WITH_AUTHOR} WHERE c.invention_id = $1 ORDER BY c.created_at DESC, c.id DESC",
        invention_id,
    )
    return [_row_to_comment(row) for row in rows]
