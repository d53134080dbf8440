"""
Table definitions for the invention workflow.

Applied by the 001 migration and by Database.create_schema() in tests.
Statements are idempotent so they can run against an existing database.
"""

from __future__ import annotations

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE,
        first_name TEXT,
        last_name TEXT,
        profile_image_url TEXT,
        role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'faculty', 'admin')),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inventions (
        id SERIAL PRIMARY KEY,
        title VARCHAR(255) NOT NULL,
        description TEXT NOT NULL,
        tags TEXT[] NOT NULL DEFAULT '{}',
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK (status IN ('pending', 'under_review', 'approved', 'rejected')),
        funding_amount INTEGER CHECK (funding_amount >= 0),
        author_id TEXT NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        CONSTRAINT funding_only_when_approved
            CHECK (funding_amount IS NULL OR status = 'approved')
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_inventions_created_at ON inventions (created_at DESC, id DESC)",
    "CREATE INDEX IF NOT EXISTS idx_inventions_status ON inventions (status)",
    "CREATE INDEX IF NOT EXISTS idx_inventions_tags ON inventions USING GIN (tags)",
    """
    CREATE TABLE IF NOT EXISTS files (
        id SERIAL PRIMARY KEY,
        filename VARCHAR(255) NOT NULL UNIQUE,
        original_name VARCHAR(255) NOT NULL,
        mime_type VARCHAR(100) NOT NULL,
        size INTEGER NOT NULL CHECK (size > 0),
        invention_id INTEGER NOT NULL REFERENCES inventions(id) ON DELETE CASCADE,
        uploaded_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_files_invention_id ON files (invention_id)",
    """
    CREATE TABLE IF NOT EXISTS comments (
        id SERIAL PRIMARY KEY,
        content TEXT NOT NULL CHECK (length(btrim(content)) > 0),
        invention_id INTEGER NOT NULL REFERENCES inventions(id) ON DELETE CASCADE,
        author_id TEXT NOT NULL REFERENCES users(id),
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_comments_invention_id ON comments (invention_id)",
    """
    CREATE TABLE IF NOT EXISTS likes (
        id SERIAL PRIMARY KEY,
        invention_id INTEGER NOT NULL REFERENCES inventions(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL REFERENCES users(id),
        is_like BOOLEAN NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT clock_timestamp(),
        CONSTRAINT likes_invention_user_unique UNIQUE (invention_id, user_id)
    )
    """,
)

DROP_STATEMENTS: tuple[str, ...] = (
    "DROP TABLE IF EXISTS likes",
    "DROP TABLE IF EXISTS comments",
    "DROP TABLE IF EXISTS files",
    "DROP TABLE IF EXISTS inventions",
    "DROP TABLE IF EXISTS users",
)
