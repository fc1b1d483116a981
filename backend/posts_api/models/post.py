"""
Posts & Comments API — Post SQLAlchemy Model
==============================================

What:  ORM model representing the `posts` table.
Who:   Used by the post SqlCollection and by alembic for schema management.

Table Design:
    - id: 32-char hex string from uuid4, assigned in Python at insert time
      and exposed to clients as `_id`
    - title / content / sender: required text fields
    - created_at: insertion timestamp (UTC), exposed as `createdAt`
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from posts_api.database import Base


def new_record_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """A post authored by `sender`."""

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
        comment="Opaque record identifier (uuid4 hex)",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Identifies the author; not a foreign key
    sender: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="When this post was created (UTC)",
    )

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, sender='{self.sender}', title='{self.title}')>"
