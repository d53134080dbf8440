"""
Repository layer for InventHub.

All SQL lives here and ONLY here. No database access outside this module.
Every function takes an open asyncpg connection as its first argument.
"""

from inventhub.repos import comment_repo, file_repo, invention_repo, like_repo, user_repo

__all__ = [
    "user_repo",
    "invention_repo",
    "comment_repo",
    "file_repo",
    "like_repo",
]
