"""
Posts & Comments API — Post Routes
====================================

    GET    /post          list posts (filter e.g. ?sender=user123)
    GET    /post/{id}     fetch one post
    POST   /post          create a post (title, content, sender)
    PUT    /post/{id}     update a post
    DELETE /post/{id}     delete a post
"""

from fastapi import APIRouter

from posts_api.routes.resources import build_resource_router
from posts_api.schemas.post import PostRecord
from posts_api.services.resource_controller import ResourceController


def build_router(controller: ResourceController) -> APIRouter:
    return build_resource_router(
        controller,
        prefix="/post",
        tag="Posts",
        noun="post",
        record_schema=PostRecord,
        create_example={
            "title": "My First Post",
            "content": "This is the content of my first post",
            "sender": "user123",
        },
        update_example={"content": "Updated post content"},
        filter_fields={"sender": "author ID", "title": "exact title"},
    )
