#!/usr/bin/env python3
"""
Seed demo inventions across every review status.

Usage:
    python scripts/seed_demo_inventions.py [user_id]

If no user_id provided, creates (or refreshes) a demo researcher and a
demo admin. Inventions are authored by the researcher and reviewed by
the admin.
"""

import asyncio
import sys

from inventhub.config import settings
from inventhub.db import Database
from inventhub.models.invention import CreateInventionRequest
from inventhub.models.user import UpsertUserRequest
from inventhub.repos import comment_repo, invention_repo, like_repo, user_repo

DEMO_RESEARCHER = UpsertUserRequest(
    id="demo-researcher",
    email="researcher@example.com",
    first_name="Ada",
    last_name="Researcher",
    role="user",
)

DEMO_ADMIN = UpsertUserRequest(
    id="demo-admin",
    email="admin@example.com",
    first_name="Grace",
    last_name="Admin",
    role="admin",
)

# (title, description, tags, status, funding)
DEMO_INVENTIONS = [
    (
        "Low-cost water purifier",
        "Ceramic filter with a silver nanoparticle coating for rural households.",
        ["Sustainability", "Healthcare"],
        "approved",
        15000,
    ),
    (
        "Crop disease detector",
        "Phone camera model that flags leaf blight before it spreads.",
        ["AI/ML", "Agriculture"],
        "under_review",
        None,
    ),
    (
        "Campus energy dashboard",
        "Live metering of building energy use with anomaly alerts.",
        ["IoT", "Energy"],
        "pending",
        None,
    ),
    (
        "Perpetual motion fan",
        "A fan that powers itself.",
        ["Energy"],
        "rejected",
        None,
    ),
]


async def seed(db: Database, author_id: str | None) -> list[int]:
    """Create the demo inventions and return their ids."""
    created = []
    async with db.transaction() as conn:
        if author_id is None:
            author_id = (await user_repo.upsert_user(conn, DEMO_RESEARCHER)).id
        reviewer = await user_repo.upsert_user(conn, DEMO_ADMIN)

        for title, description, tags, status, funding in DEMO_INVENTIONS:
            invention = await invention_repo.create_invention(
                conn,
                author_id,
                CreateInventionRequest(title=title, description=description, tags=tags),
            )
            if status != "pending":
                await invention_repo.set_status(conn, invention.id, status, funding)
            await comment_repo.create_comment(conn, invention.id, reviewer.id, f"Reviewed: {status}.")
            await like_repo.toggle_like(conn, invention.id, reviewer.id, status != "rejected")
            created.append(invention.id)
    return created


async def main():
    db = Database(settings.DATABASE_URL)
    await db.connect()

    try:
        author_id = sys.argv[1] if len(sys.argv) >= 2 else None
        if author_id is not None:
            async with db.connection() as conn:
                if await user_repo.get_user(conn, author_id) is None:
                    print(f"No user with id {author_id}")
                    sys.exit(1)

        ids = await seed(db, author_id)
        print(f"Created demo inventions: {ids}")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
