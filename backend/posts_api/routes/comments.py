"""
Posts & Comments API — Comment Routes
=======================================

    GET    /comment          list comments (filter e.g. ?postId=...)
    GET    /comment/{id}     fetch one comment
    POST   /comment          add a comment (content, postId, sender)
    PUT    /comment/{id}     update a comment's content
    DELETE /comment/{id}     delete a comment
"""

from fastapi import APIRouter

from posts_api.routes.resources import build_resource_router
from posts_api.schemas.comment import CommentRecord
from posts_api.services.resource_controller import ResourceController


def build_router(controller: ResourceController) -> APIRouter:
    return build_resource_router(
        controller,
        prefix="/comment",
        tag="Comments",
        noun="comment",
        record_schema=CommentRecord,
        create_example={
            "content": "Great post!",
            "postId": "60d0fe4f5311236168a109ca",
            "sender": "user123",
        },
        update_example={"content": "Updated comment content"},
        filter_fields={"postId": "comments on one post", "sender": "author ID"},
    )
