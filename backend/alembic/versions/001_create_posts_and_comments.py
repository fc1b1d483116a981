"""Create posts and comments tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates the `posts` and `comments` tables.
How:   Portable column types (string ids, timezone-aware DateTime) so the same
       revision runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "posts",
        sa.Column(
            "id",
            sa.String(32),
            nullable=False,
            comment="Opaque record identifier (uuid4 hex)",
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("sender", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this post was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_posts_created_at", "posts", ["created_at"])

    # post_id is not a foreign key: comments may outlive their post
    op.create_table(
        "comments",
        sa.Column(
            "id",
            sa.String(32),
            nullable=False,
            comment="Opaque record identifier (uuid4 hex)",
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("post_id", sa.String(64), nullable=False),
        sa.Column("sender", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When this comment was created (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])
    op.create_index("idx_comments_created_at", "comments", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_comments_created_at", table_name="comments")
    op.drop_index("idx_comments_post_id", table_name="comments")
    op.drop_table("comments")
    op.drop_index("idx_posts_created_at", table_name="posts")
    op.drop_table("posts")
