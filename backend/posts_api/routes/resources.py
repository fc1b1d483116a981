"""
Posts & Comments API — Resource Router Builder
================================================

What:  Builds the CRUD router for one resource around an injected
       ResourceController.
How:   Routes stay thin: pull query/path/body out of the request, await the
       controller, return its result. Status codes for failures come from the
       controller via exceptions; success codes are fixed here (201 on create).
Who:   Called by routes/posts.py and routes/comments.py during app wiring.

Bodies are read straight from the request, as a JSON object or as an HTML
form, so that field validation happens in the collection (400 with the
collection's message) rather than in FastAPI.

A query key given more than once (`?sender=a&sender=b`) filters on any of
its values.
"""

from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Request, status

from posts_api.exceptions import ValidationError
from posts_api.schemas.common import ErrorResponse, MessageResponse, RecordSchema
from posts_api.services.collection import Record
from posts_api.services.resource_controller import ResourceController

_NOT_FOUND = {404: {"description": "Resource not found", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid input or missing required fields", "model": ErrorResponse}}

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Return the request body as a dict.

    Form bodies keep their text fields (last value wins); anything else must
    be a JSON object. Raises ValidationError otherwise.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Invalid request: body is not valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Invalid request: body must be a JSON object")
    return body


def query_filter(request: Request) -> Dict[str, Any]:
    """Query string → filter; repeated keys become a list of accepted values."""
    grouped: Dict[str, List[str]] = {}
    for key, value in request.query_params.multi_items():
        grouped.setdefault(key, []).append(value)
    return {key: values[0] if len(values) == 1 else values for key, values in grouped.items()}


def _request_body_doc(example: Dict[str, Any]) -> Dict[str, Any]:
    schema = {"type": "object", "example": example}
    return {
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }


def build_resource_router(
    controller: ResourceController,
    *,
    prefix: str,
    tag: str,
    noun: str,
    record_schema: Type[RecordSchema],
    create_example: Dict[str, Any],
    update_example: Dict[str, Any],
    filter_fields: Optional[Dict[str, str]] = None,
) -> APIRouter:
    """
    Args:
        controller:     Controller instance for this resource
        prefix:         URL prefix, e.g. "/post"
        tag:            OpenAPI tag
        noun:           Human name used in summaries ("post")
        record_schema:  Documented response shape
        create_example: Example body for POST
        update_example: Example body for PUT
        filter_fields:  Documented list filters (wire name → description)
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    record_response = {200: {"description": f"The {noun}", "model": record_schema}}

    filters_doc = ""
    if filter_fields:
        filters_doc = " Filterable by: " + "; ".join(
            f"`{name}` ({description})" for name, description in filter_fields.items()
        ) + "."

    @router.get(
        "",
        summary=f"List {noun}s",
        description=(
            f"Returns every {noun}, or only those whose fields exactly match all "
            f"query parameters. Repeat a parameter to accept several values.{filters_doc}"
        ),
        responses={200: {"description": f"List of {noun}s"}, **_SERVER_ERROR},
    )
    async def list_records(request: Request) -> Any:
        return await controller.list(query_filter(request))

    @router.get(
        "/{resource_id}",
        summary=f"Get a {noun} by ID",
        responses={**record_response, **_NOT_FOUND, **_SERVER_ERROR},
    )
    async def get_record(resource_id: str) -> Record:
        return await controller.get_by_id(resource_id)

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        summary=f"Add a new {noun}",
        responses={
            201: {"description": f"{noun.capitalize()} created", "model": record_schema},
            **_BAD_REQUEST,
        },
        openapi_extra=_request_body_doc(create_example),
    )
    async def create_record(request: Request) -> Record:
        return await controller.create(await read_body(request))

    @router.put(
        "/{resource_id}",
        summary=f"Update a {noun}",
        description=f"Applies the given fields to the {noun} and returns it after the update.",
        responses={**record_response, **_BAD_REQUEST, **_NOT_FOUND},
        openapi_extra=_request_body_doc(update_example),
    )
    async def update_record(resource_id: str, request: Request) -> Record:
        return await controller.update_by_id(resource_id, await read_body(request))

    @router.delete(
        "/{resource_id}",
        summary=f"Delete a {noun}",
        responses={
            200: {"description": f"{noun.capitalize()} deleted", "model": MessageResponse},
            **_NOT_FOUND,
            **_SERVER_ERROR,
        },
    )
    async def delete_record(resource_id: str) -> Dict[str, str]:
        return await controller.delete_by_id(resource_id)

    return router
