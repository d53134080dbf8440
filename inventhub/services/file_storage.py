"""Local-disk storage for invention attachments."""

from __future__ import annotations

import logging
import secrets
from pathlib import Path

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from inventhub.config import settings
from inventhub.errors import NotFoundError, ValidationError
from inventhub.models.file import StoredFile

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_MAX_NAME_LENGTH = 255


class LocalFileStorage:
    """Writes uploads under one directory with random, opaque names."""

    def __init__(
        self,
        root: str | Path | None = None,
        max_bytes: int | None = None,
        allowed_mime_types: frozenset[str] | None = None,
    ) -> None:
        self.root = Path(root or settings.UPLOAD_DIR).resolve()
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES
        self.allowed_mime_types = allowed_mime_types or settings.ALLOWED_MIME_TYPES

    async def save(self, upload: UploadFile) -> StoredFile:
        """
        Stream an upload to disk.

        Args:
            upload: Multipart file from the request

        Returns:
            StoredFile metadata for the repository

        Raises:
            ValidationError: Disallowed type, overlong name, empty file or over the size limit
        """
        mime_type = upload.content_type or "application/octet-stream"
        original_name = Path(upload.filename or "upload").name
        if mime_type not in self.allowed_mime_types:
            raise ValidationError(
                "Invalid file type. Only PDF, images, and documents are allowed."
            )
        if len(original_name) > _MAX_NAME_LENGTH:
            raise ValidationError(f"File name is too long. Maximum length is {_MAX_NAME_LENGTH} characters.")

        await aiofiles.os.makedirs(self.root, exist_ok=True)
        filename = secrets.token_hex(16)
        path = self.root / filename
        size = 0
        try:
            async with aiofiles.open(path, "wb") as out:
                while chunk := await upload.read(_CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_bytes:
                        max_mb = self.max_bytes // (1024 * 1024)
                        raise ValidationError(f"File too large. Maximum size is {max_mb}MB")
                    await out.write(chunk)
            if size == 0:
                raise ValidationError(f"File '{original_name}' is empty.")
            stored = StoredFile(
                filename=filename,
                original_name=original_name,
                mime_type=mime_type,
                size=size,
            )
        except Exception:
            await self.delete(filename)
            raise

        logger.info("Stored upload %s as %s (%d bytes)", original_name, filename, size)
        return stored

    def path_for(self, filename: str) -> Path:
        """
        Resolve a stored filename to its path on disk.

        Raises:
            NotFoundError: Name escapes the upload directory or the file is missing
        """
        path = (self.root / filename).resolve()
        if path.parent != self.root or not path.is_file():
            raise NotFoundError("File not found.")
        return path

    async def delete(self, filename: str) -> None:
        """Remove a stored file if it exists."""
        path = self.root / filename
        if await aiofiles.os.path.exists(path):
            await aiofiles.os.remove(path)
