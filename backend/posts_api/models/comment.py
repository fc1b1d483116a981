"""
Posts & Comments API — Comment SQLAlchemy Model
=================================================

What:  ORM model representing the `comments` table.

`post_id` holds the identifier of the post being commented on. It is indexed
for the `GET /comment?postId=...` lookup but is deliberately not a foreign
key: comments may reference posts that do not (or no longer) exist.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from posts_api.database import Base
from posts_api.models.post import new_record_id, utc_now


class Comment(Base):
    """A comment by `sender` on the post identified by `post_id`."""

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_record_id,
        comment="Opaque record identifier (uuid4 hex)",
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)
    post_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sender: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        comment="When this comment was created (UTC)",
    )

    __table_args__ = (
        Index("idx_comments_post_id", "post_id"),
        Index("idx_comments_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id='{self.post_id}', sender='{self.sender}')>"
