"""User repository. Rows are owned by the external auth provider."""

from __future__ import annotations

from asyncpg import Connection, Record

from inventhub.models.user import UpsertUserRequest, User


def _row_to_user(row: Record) -> User:
    """Convert a database row to a User model."""
    return User(
        id=row["id"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        profile_image_url=row["profile_image_url"],
        role=row["role"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def get_user(conn: Connection, user_id: str) -> User | None:
    """Get a user by ID."""
    row = await conn.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
    return _row_to_user(row) if row else None


async def upsert_user(conn: Connection, req: UpsertUserRequest) -> User:
    """
    Insert a user or refresh their profile on login.

    The role is only written when the request carries one, so a login
    never demotes an admin.

    Args:
        conn: Open connection
        req: Identity claims from the auth provider

    Returns:
        The stored User
    """
    row = await conn.fetchrow(
        """
        INSERT INTO users (id, email, first_name, last_name, profile_image_url, role)
        VALUES ($1, $2, $3, $4, $5, COALESCE($6, 'user'))
        ON CONFLICT (id) DO UPDATE SET
            email = EXCLUDED.email,
            first_name = EXCLUDED.first_name,
            last_name = EXCLUDED.last_name,
            profile_image_url = EXCLUDED.profile_image_url,
            role = COALESCE($6, users.role),
            updated_at = now()
        RETURNING *
        """,
        req.id,
        req.email,
        req.first_name,
        req.last_name,
        req.profile_image_url,
        req.role,
    )
    return _row_to_user(row)
