"""File metadata repository. The bytes themselves are never touched here."""

from __future__ import annotations

from asyncpg import Connection

from inventhub.errors import ValidationError
from inventhub.models.file import InventionFile, StoredFile
from inventhub.repos import invention_repo


async def save_file_info(conn: Connection, invention_id: int, stored: StoredFile) -> InventionFile:
    """
    Record metadata for a file the storage layer already wrote.

    Raises:
        ValidationError: Size is not positive
        NotFoundError: No invention with this id
    """
    if stored.size <= 0:
        raise ValidationError(f"File '{stored.original_name}' is empty.")
    await invention_repo.lock_invention(conn, invention_id)

    row = await conn.fetchrow(
        """
        INSERT INTO files (filename, original_name, mime_type, size, invention_id)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        stored.filename,
        stored.original_name,
        stored.mime_type,
        stored.size,
        invention_id,
    )
    return InventionFile(**dict(row))


async def list_for_invention(conn: Connection, invention_id: int) -> list[InventionFile]:
    """List an invention's files in upload order."""
    rows = await conn.fetch(
        "SELECT * FROM files WHERE invention_id = $1 ORDER BY uploaded_at, id",
        invention_id,
    )
    return [InventionFile(**dict(row)) for row in rows]


async def get_by_filename(conn: Connection, filename: str) -> InventionFile | None:
    """Look up metadata by the storage-internal filename."""
    row = await conn.fetchrow("SELECT * FROM files WHERE filename = $1", filename)
    return InventionFile(**dict(row)) if row else None
