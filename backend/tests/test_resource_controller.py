"""
Posts & Comments API — Resource Controller Unit Tests
=======================================================

What:  Tests for ResourceController's request → collection → response mapping.
How:   The collection is an AsyncMock; no database involved.

What we test:
    ✅ Each operation forwards its input to the right collection call
    ✅ Absent records raise NotFoundError ("Resource not found")
    ✅ Collection failures map to 400 (create/update) or 500 (list/get/delete)
    ✅ Failure messages are forwarded verbatim, with a fallback when empty
"""

import pytest
from sqlalchemy.exc import OperationalError

from posts_api.exceptions import (
    NotFoundError,
    OperationFailedError,
    UNKNOWN_ERROR_MESSAGE,
    ValidationError,
)
from posts_api.services.collection import Collection
from posts_api.services.resource_controller import DELETED_MESSAGE, ResourceController


RECORD = {
    "_id": "0f8fad5bd9cb469fa16570867728950e",
    "title": "My First Post",
    "content": "Hello",
    "sender": "user123",
    "createdAt": "2026-10-18T12:00:00Z",
}


class TestControllerWiring:

    @pytest.mark.asyncio
    async def test_sql_collection_satisfies_protocol(self, post_collection):
        assert isinstance(post_collection, Collection)

    def test_controller_holds_only_its_collection(self, mock_collection):
        controller = ResourceController(mock_collection)
        assert controller.collection is mock_collection
        assert vars(controller) == {"collection": mock_collection}


class TestControllerList:

    @pytest.mark.asyncio
    async def test_list_passes_query_as_filter(self, mock_collection):
        mock_collection.find.return_value = [RECORD]
        controller = ResourceController(mock_collection)

        result = await controller.list({"sender": "user123"})

        assert result == [RECORD]
        mock_collection.find.assert_awaited_once_with({"sender": "user123"})

    @pytest.mark.asyncio
    async def test_list_empty_filter(self, mock_collection):
        controller = ResourceController(mock_collection)
        assert await controller.list({}) == []
        mock_collection.find.assert_awaited_once_with({})

    @pytest.mark.asyncio
    async def test_list_failure_is_500_with_message(self, mock_collection):
        mock_collection.find.side_effect = RuntimeError("connection refused")
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.list({})

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "connection refused"

    @pytest.mark.asyncio
    async def test_failure_without_message_uses_fallback(self, mock_collection):
        mock_collection.find.side_effect = RuntimeError()
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.list({})

        assert exc_info.value.message == UNKNOWN_ERROR_MESSAGE


class TestControllerGet:

    @pytest.mark.asyncio
    async def test_get_found(self, mock_collection):
        mock_collection.find_by_id.return_value = RECORD
        controller = ResourceController(mock_collection)

        assert await controller.get_by_id(RECORD["_id"]) == RECORD
        mock_collection.find_by_id.assert_awaited_once_with(RECORD["_id"])

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, mock_collection):
        controller = ResourceController(mock_collection)

        with pytest.raises(NotFoundError) as exc_info:
            await controller.get_by_id("missing")

        assert exc_info.value.message == "Resource not found"

    @pytest.mark.asyncio
    async def test_get_store_failure_is_500(self, mock_collection):
        mock_collection.find_by_id.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.get_by_id("abc")

        assert exc_info.value.status_code == 500
        assert "db down" in exc_info.value.message


class TestControllerCreate:

    @pytest.mark.asyncio
    async def test_create_returns_new_record(self, mock_collection):
        mock_collection.create.return_value = RECORD
        controller = ResourceController(mock_collection)
        body = {"title": "My First Post", "content": "Hello", "sender": "user123"}

        assert await controller.create(body) == RECORD
        mock_collection.create.assert_awaited_once_with(body)

    @pytest.mark.asyncio
    async def test_create_validation_failure_is_400(self, mock_collection):
        message = "post validation failed: title: Path `title` is required."
        mock_collection.create.side_effect = ValidationError(message=message)
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.create({"content": "Hello", "sender": "user123"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == message


class TestControllerUpdate:

    @pytest.mark.asyncio
    async def test_update_requests_post_update_record_with_validation(self, mock_collection):
        updated = {**RECORD, "content": "X"}
        mock_collection.find_by_id_and_update.return_value = updated
        controller = ResourceController(mock_collection)

        result = await controller.update_by_id(RECORD["_id"], {"content": "X"})

        assert result == updated
        mock_collection.find_by_id_and_update.assert_awaited_once_with(
            RECORD["_id"], {"content": "X"}, return_updated=True, validate=True
        )

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, mock_collection):
        controller = ResourceController(mock_collection)

        with pytest.raises(NotFoundError):
            await controller.update_by_id("missing", {"content": "X"})

    @pytest.mark.asyncio
    async def test_update_failure_is_400(self, mock_collection):
        mock_collection.find_by_id_and_update.side_effect = ValidationError(
            message="Validation failed: content: Path `content` is required."
        )
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.update_by_id(RECORD["_id"], {"content": None})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message.startswith("Validation failed")


class TestControllerDelete:

    @pytest.mark.asyncio
    async def test_delete_returns_confirmation(self, mock_collection):
        mock_collection.find_by_id_and_delete.return_value = RECORD
        controller = ResourceController(mock_collection)

        assert await controller.delete_by_id(RECORD["_id"]) == {"message": DELETED_MESSAGE}
        assert DELETED_MESSAGE == "Resource deleted successfully"

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, mock_collection):
        controller = ResourceController(mock_collection)

        with pytest.raises(NotFoundError):
            await controller.delete_by_id("missing")

    @pytest.mark.asyncio
    async def test_delete_failure_is_500(self, mock_collection):
        mock_collection.find_by_id_and_delete.side_effect = RuntimeError("disk I/O error")
        controller = ResourceController(mock_collection)

        with pytest.raises(OperationFailedError) as exc_info:
            await controller.delete_by_id(RECORD["_id"])

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "disk I/O error"
