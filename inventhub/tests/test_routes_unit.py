"""
Route tests with the repository layer patched out.

Cover status-code mapping and the wire format without a database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import asyncpg
import httpx
import pytest
import pytest_asyncio

from inventhub.auth import get_current_user
from inventhub.errors import DataIntegrityError, NotFoundError
from inventhub.main import create_app
from inventhub.models.invention import EngagementCounts, Invention, InventionSummary, Stats
from inventhub.models.user import User, UserPublic
from inventhub.services.file_storage import LocalFileStorage

pytestmark = pytest.mark.asyncio(loop_scope="session")

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class _NoDatabase:
    """Stands in for Database; the repos are patched so the conn is never used."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[object]:
        yield object()

    connection = transaction


def _user(role: str = "user") -> User:
    return User(id=f"{role}-1", first_name=role.title(), role=role, created_at=NOW, updated_at=NOW)


def _invention(**overrides) -> Invention:
    fields = {
        "id": 1,
        "title": "Smart Grid",
        "description": "Balancing load",
        "tags": ["IoT"],
        "status": "pending",
        "funding_amount": None,
        "author_id": "user-1",
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Invention(**fields)


@pytest_asyncio.fixture(loop_scope="session")
async def make_client(tmp_path):
    """Factory: client whose requests authenticate as the given user (or nobody)."""
    clients = []

    async def _make(user: User | None = None) -> httpx.AsyncClient:
        app = create_app(db=_NoDatabase(), file_storage=LocalFileStorage(tmp_path))
        if user is not None:
            app.dependency_overrides[get_current_user] = lambda: user
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.aclose()


async def test_health_endpoint(make_client):
    client = await make_client()
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


class TestListInventions:
    async def test_wire_format(self, make_client):
        summary = InventionSummary(
            **_invention().model_dump(),
            author=UserPublic.from_user(_user()),
            counts=EngagementCounts(likes=2, dislikes=1, comments=4, files=2),
        )
        client = await make_client()
        with patch("inventhub.repos.invention_repo.list_inventions", AsyncMock(return_value=[summary])):
            res = await client.get("/api/inventions")

        assert res.status_code == 200
        [item] = res.json()
        assert item["id"] == 1
        assert item["authorId"] == "user-1"
        assert item["author"]["firstName"] == "User"
        assert item["_count"] == {"likes": 2, "dislikes": 1, "comments": 4, "files": 2}

    async def test_query_params_become_filters(self, make_client):
        client = await make_client()
        mock = AsyncMock(return_value=[])
        with patch("inventhub.repos.invention_repo.list_inventions", mock):
            res = await client.get("/api/inventions", params={"status": "approved", "tags": "IoT,Energy"})

        assert res.status_code == 200
        filters = mock.call_args.args[1]
        assert filters.status == "approved"
        assert filters.tags == ("IoT", "Energy")

    async def test_unknown_status_is_400(self, make_client):
        client = await make_client()
        res = await client.get("/api/inventions", params={"status": "archived"})
        assert res.status_code == 400
        assert "archived" in res.json()["message"]


async def test_unknown_invention_is_404(make_client):
    client = await make_client()
    with patch("inventhub.repos.invention_repo.get_invention_detail", AsyncMock(return_value=None)):
        res = await client.get("/api/inventions/999")
    assert res.status_code == 404
    assert res.json() == {"message": "Invention not found."}


class TestStatusUpdate:
    async def test_unauthenticated_is_401(self, make_client):
        client = await make_client()
        res = await client.patch("/api/inventions/1/status", json={"status": "approved"})
        assert res.status_code == 401
        assert res.json() == {"message": "Not authenticated. Please sign in."}

    @pytest.mark.parametrize("role", ["user", "faculty"])
    async def test_non_admin_is_403(self, make_client, role):
        client = await make_client(_user(role))
        mock = AsyncMock()
        with patch("inventhub.repos.invention_repo.set_status", mock):
            res = await client.patch("/api/inventions/1/status", json={"status": "approved"})
        assert res.status_code == 403
        mock.assert_not_called()

    async def test_admin_approves_with_funding(self, make_client):
        client = await make_client(_user("admin"))
        approved = _invention(status="approved", funding_amount=5000)
        mock = AsyncMock(return_value=approved)
        with patch("inventhub.repos.invention_repo.set_status", mock):
            res = await client.patch(
                "/api/inventions/1/status",
                json={"status": "approved", "fundingAmount": 5000},
            )

        assert res.status_code == 200
        assert res.json()["fundingAmount"] == 5000
        assert mock.call_args.args[1:] == (1, "approved", 5000)

    async def test_negative_funding_is_400(self, make_client):
        client = await make_client(_user("admin"))
        res = await client.patch(
            "/api/inventions/1/status",
            json={"status": "approved", "fundingAmount": -10},
        )
        assert res.status_code == 400

    async def test_unknown_invention_is_404(self, make_client):
        client = await make_client(_user("admin"))
        with patch("inventhub.repos.invention_repo.set_status", AsyncMock(return_value=None)):
            res = await client.patch("/api/inventions/42/status", json={"status": "rejected"})
        assert res.status_code == 404


class TestVotes:
    async def test_toggle_reports_resulting_vote(self, make_client):
        client = await make_client(_user())
        mock = AsyncMock(return_value=False)
        with patch("inventhub.repos.like_repo.toggle_like", mock):
            res = await client.post("/api/inventions/3/like", json={"isLike": False})

        assert res.status_code == 200
        assert res.json() == {"success": True, "vote": False}
        assert mock.call_args.args[1:] == (3, "user-1", False)

    async def test_toggle_on_missing_invention_is_404(self, make_client):
        client = await make_client(_user())
        mock = AsyncMock(side_effect=NotFoundError("Invention not found."))
        with patch("inventhub.repos.like_repo.toggle_like", mock):
            res = await client.post("/api/inventions/3/like", json={"isLike": True})
        assert res.status_code == 404

    async def test_duplicate_vote_rows_are_500(self, make_client):
        client = await make_client(_user())
        mock = AsyncMock(side_effect=DataIntegrityError("Found 2 like rows"))
        with patch("inventhub.repos.like_repo.toggle_like", mock):
            res = await client.post("/api/inventions/3/like", json={"isLike": True})
        assert res.status_code == 500


async def test_bad_token_is_401_with_message(make_client):
    client = await make_client()
    res = await client.get("/api/auth/user", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.status_code == 401
    assert res.json() == {"message": "Invalid session token. Please sign in again."}


async def test_unknown_route_uses_message_body(make_client):
    client = await make_client()
    res = await client.get("/api/nowhere")
    assert res.status_code == 404
    assert res.json() == {"message": "Not Found"}


async def test_user_like_on_missing_invention_is_404(make_client):
    client = await make_client(_user())
    lookup = AsyncMock()
    with (
        patch("inventhub.repos.invention_repo.get_invention", AsyncMock(return_value=None)),
        patch("inventhub.repos.like_repo.get_user_like", lookup),
    ):
        res = await client.get("/api/inventions/77/user-like")

    assert res.status_code == 404
    assert res.json() == {"message": "Invention not found."}
    lookup.assert_not_called()


async def test_user_like_without_vote_is_null(make_client):
    client = await make_client(_user())
    with (
        patch("inventhub.repos.invention_repo.get_invention", AsyncMock(return_value=_invention(id=77))),
        patch("inventhub.repos.like_repo.get_user_like", AsyncMock(return_value=None)),
    ):
        res = await client.get("/api/inventions/77/user-like")

    assert res.status_code == 200
    assert res.json() is None


async def test_comment_requires_content(make_client):
    client = await make_client(_user())
    res = await client.post("/api/inventions/1/comments", json={"content": ""})
    assert res.status_code == 400


async def test_storage_failure_is_500(make_client):
    client = await make_client()
    mock = AsyncMock(side_effect=asyncpg.PostgresError("connection lost"))
    with patch("inventhub.repos.invention_repo.get_stats", mock):
        res = await client.get("/api/stats")
    assert res.status_code == 500
    assert res.json() == {"message": "Internal storage error."}


async def test_stats(make_client):
    client = await make_client()
    stats = Stats(total=5, pending=2, approved=2, rejected=1)
    with patch("inventhub.repos.invention_repo.get_stats", AsyncMock(return_value=stats)):
        res = await client.get("/api/stats")
    assert res.json() == {"total": 5, "pending": 2, "approved": 2, "rejected": 1}
