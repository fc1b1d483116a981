"""
Posts & Comments API — Post Schemas
=====================================

What:  Validation rules and wire shape of post records.

    PostCreate   body of POST /post (all fields required, non-empty)
    PostUpdate   body of PUT /post/{id} (any subset of the fields)
    PostRecord   what the API returns for a stored post
"""

from typing import Optional

from pydantic import Field

from posts_api.schemas.common import BodySchema, PartialUpdateSchema, RecordSchema


class PostCreate(BodySchema):
    title: str = Field(min_length=1, description="The post title", examples=["My First Post"])
    content: str = Field(
        min_length=1,
        description="The post content",
        examples=["This is the content of my first post"],
    )
    sender: str = Field(
        min_length=1,
        description="The user ID of the post creator",
        examples=["user123"],
    )


class PostUpdate(PartialUpdateSchema):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    sender: Optional[str] = Field(default=None, min_length=1)


class PostRecord(RecordSchema):
    title: str
    content: str
    sender: str
