"""Initial schema: users, inventions, files, comments and likes.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""

from alembic import op

from inventhub.schema import DROP_STATEMENTS, SCHEMA_STATEMENTS


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    for statement in SCHEMA_STATEMENTS:
        op.execute(statement)


def downgrade():
    for statement in DROP_STATEMENTS:
        op.execute(statement)
