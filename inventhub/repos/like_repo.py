"""
Like repository: the vote toggle and per-user vote lookup.

likes has UNIQUE (invention_id, user_id). The toggle never inserts blindly:
a lost insert race is resolved by re-reading the winning row and applying
the transition to it.
"""

from __future__ import annotations

import logging

from asyncpg import Connection, Record

from inventhub.errors import DataIntegrityError
from inventhub.models.like import Like
from inventhub.repos import invention_repo
from inventhub.services.voting import Vote, VoteWrite, next_vote, write_for

logger = logging.getLogger(__name__)

# Insert attempts before a conflict is treated as a broken invariant
_MAX_ATTEMPTS = 2


async def _lock_existing(conn: Connection, invention_id: int, user_id: str) -> Record | None:
    rows = await conn.fetch(
        """
        SELECT * FROM likes
        WHERE invention_id = $1 AND user_id = $2
        FOR UPDATE
        """,
        invention_id,
        user_id,
    )
    if len(rows) > 1:
        raise DataIntegrityError(
            f"Found {len(rows)} like rows for invention {invention_id} and user {user_id}."
        )
    return rows[0] if rows else None


async def get_user_like(conn: Connection, invention_id: int, user_id: str) -> Like | None:
    """Get a user's current vote row on an invention, if any."""
    row = await conn.fetchrow(
        "SELECT * FROM likes WHERE invention_id = $1 AND user_id = $2",
        invention_id,
        user_id,
    )
    return Like(**dict(row)) if row else None


async def toggle_like(conn: Connection, invention_id: int, user_id: str, is_like: bool) -> Vote:
    """
    Apply a like (True) or dislike (False) from a user.

    Must run inside a transaction so the row lock holds until commit.

    Args:
        conn: Open connection inside a transaction
        invention_id: Invention being voted on
        user_id: Voting user
        is_like: True for like, False for dislike

    Returns:
        The user's vote after the toggle: True, False, or None (retracted)

    Raises:
        NotFoundError: No invention with this id
        DataIntegrityError: Duplicate rows exist, or the insert conflict would not resolve
    """
    await invention_repo.lock_invention(conn, invention_id)

    for _ in range(_MAX_ATTEMPTS):
        existing = await _lock_existing(conn, invention_id, user_id)
        current: Vote = existing["is_like"] if existing else None
        result = next_vote(current, is_like)
        write = write_for(current, is_like)

        if write is VoteWrite.DELETE:
            await conn.execute("DELETE FROM likes WHERE id = $1", existing["id"])
        elif write is VoteWrite.UPDATE:
            await conn.execute("UPDATE likes SET is_like = $2 WHERE id = $1", existing["id"], result)
        else:
            inserted = await conn.fetchval(
                """
                INSERT INTO likes (invention_id, user_id, is_like)
                VALUES ($1, $2, $3)
                ON CONFLICT (invention_id, user_id) DO NOTHING
                RETURNING id
                """,
                invention_id,
                user_id,
                result,
            )
            if inserted is None:
                # Another request inserted first; toggle against its row.
                logger.info("Like insert conflict on invention %s for %s, re-reading", invention_id, user_id)
                continue

        logger.info("Vote on invention %s by %s: %s -> %s", invention_id, user_id, current, result)
        return result

    raise DataIntegrityError(
        f"Could not settle the vote for invention {invention_id} and user {user_id}."
    )
