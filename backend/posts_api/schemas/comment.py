"""
Posts & Comments API — Comment Schemas
========================================

What:  Validation rules and wire shape of comment records. The post
       reference travels as `postId` on the wire and is `post_id` in Python.
"""

from typing import Optional

from pydantic import AliasChoices, Field

from posts_api.schemas.common import BodySchema, PartialUpdateSchema, RecordSchema


class CommentCreate(BodySchema):
    content: str = Field(min_length=1, description="The comment content", examples=["Great post!"])
    post_id: str = Field(
        alias="postId",
        min_length=1,
        description="The ID of the post to comment on",
        examples=["60d0fe4f5311236168a109ca"],
    )
    sender: str = Field(min_length=1, description="The ID of the sender", examples=["user123"])


class CommentUpdate(PartialUpdateSchema):
    content: Optional[str] = Field(default=None, min_length=1)
    post_id: Optional[str] = Field(default=None, alias="postId", min_length=1)
    sender: Optional[str] = Field(default=None, min_length=1)


class CommentRecord(RecordSchema):
    content: str
    post_id: str = Field(
        validation_alias=AliasChoices("postId", "post_id"),
        serialization_alias="postId",
    )
    sender: str
