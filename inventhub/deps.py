"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from inventhub.db import Database
from inventhub.services.file_storage import LocalFileStorage


def get_db(request: Request) -> Database:
    """The Database handle opened in the app lifespan."""
    return request.app.state.db


def get_file_storage(request: Request) -> LocalFileStorage:
    """The attachment store configured on the app."""
    return request.app.state.file_storage
