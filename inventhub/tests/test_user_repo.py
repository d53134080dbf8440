"""Tests for user upserts."""

from __future__ import annotations

import pytest

from inventhub.models.user import UpsertUserRequest
from inventhub.repos import user_repo

pytestmark = pytest.mark.asyncio(loop_scope="session")


async def test_new_user_defaults_to_user_role(conn):
    user = await user_repo.upsert_user(conn, UpsertUserRequest(id="new-user-1", email="new@example.com"))

    assert user.role == "user"
    assert user.is_admin is False
    assert await user_repo.get_user(conn, "new-user-1") == user


async def test_login_refresh_keeps_role(conn, admin):
    refreshed = await user_repo.upsert_user(
        conn,
        UpsertUserRequest(id=admin.id, email=admin.email, first_name="Renamed"),
    )

    assert refreshed.first_name == "Renamed"
    assert refreshed.role == "admin"


async def test_explicit_role_overwrites(conn, author):
    promoted = await user_repo.upsert_user(conn, UpsertUserRequest(id=author.id, role="faculty"))

    assert promoted.role == "faculty"


async def test_get_missing_user(conn):
    assert await user_repo.get_user(conn, "does-not-exist") is None
