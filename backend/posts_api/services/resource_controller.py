"""
Posts & Comments API — Generic Resource Controller
====================================================

What:  Translates one inbound request into one Collection call, and the
       result (or failure) into a status code plus JSON body.
How:   Composition: a single ResourceController class wraps whatever
       Collection it is given. Posts and comments are two instances of this
       class; neither adds behavior.
Who:   Built in main.create_app(); handed to the router builders in routes/.

Status mapping:
    ┌────────────────┬─────────┬─────────────────┬──────────────────┐
    │ Operation      │ Success │ Unknown id      │ Collection error │
    ├────────────────┼─────────┼─────────────────┼──────────────────┤
    │ list           │ 200     │ n/a             │ 500              │
    │ get_by_id      │ 200     │ 404             │ 500              │
    │ create         │ 201     │ n/a             │ 400              │
    │ update_by_id   │ 200     │ 404             │ 400              │
    │ delete_by_id   │ 200     │ 404             │ 500              │
    └────────────────┴─────────┴─────────────────┴──────────────────┘

    Failures are raised as NotFoundError / OperationFailedError; the global
    handlers in main.py render them as {"error": message}. The message is the
    collection error's own text, or "An unknown error occurred" when it has none.
"""

import logging
from typing import Any, Dict, List, Mapping, NoReturn

from posts_api.exceptions import NotFoundError, OperationFailedError, error_message
from posts_api.services.collection import Collection, Record

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Resource deleted successfully"


class ResourceController:
    """
    CRUD request handling over one Collection.

    Stateless apart from the injected collection; one instance serves every
    concurrent request for its resource.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    @property
    def resource(self) -> str:
        return getattr(self.collection, "name", "resource")

    def _fail(self, operation: str, exc: Exception, status_code: int) -> NoReturn:
        message = error_message(exc)
        log_level = logging.ERROR if status_code >= 500 else logging.WARNING
        logger.log(
            log_level,
            "%s %s failed (%d): %s",
            self.resource,
            operation,
            status_code,
            message,
            exc_info=status_code >= 500,
        )
        raise OperationFailedError(
            message=message,
            status_code=status_code,
            context={"resource": self.resource, "operation": operation,
                     "error_type": type(exc).__name__},
        ) from exc

    async def list(self, query: Mapping[str, Any]) -> List[Record]:
        """All records matching every key/value in `query` (exact match)."""
        try:
            return await self.collection.find(dict(query))
        except Exception as exc:
            self._fail("list", exc, 500)

    async def get_by_id(self, resource_id: str) -> Record:
        try:
            record = await self.collection.find_by_id(resource_id)
        except Exception as exc:
            self._fail("get", exc, 500)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=resource_id)
        return record

    async def create(self, body: Mapping[str, Any]) -> Record:
        """Insert a new record; the store assigns `_id` and `createdAt`."""
        try:
            return await self.collection.create(body)
        except Exception as exc:
            self._fail("create", exc, 400)

    async def update_by_id(self, resource_id: str, body: Mapping[str, Any]) -> Record:
        """
        Apply `body` to the record and return it as it is after the update.

        The collection re-runs its field rules on the supplied fields.
        """
        try:
            record = await self.collection.find_by_id_and_update(
                resource_id,
                body,
                return_updated=True,
                validate=True,
            )
        except Exception as exc:
            self._fail("update", exc, 400)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=resource_id)
        return record

    async def delete_by_id(self, resource_id: str) -> Dict[str, str]:
        try:
            record = await self.collection.find_by_id_and_delete(resource_id)
        except Exception as exc:
            self._fail("delete", exc, 500)
        if record is None:
            raise NotFoundError(resource=self.resource, resource_id=resource_id)
        return {"message": DELETED_MESSAGE}
