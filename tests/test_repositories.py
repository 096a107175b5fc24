"""Repository behaviour that does not need a running MongoDB."""

import pytest
from pymongo.errors import AutoReconnect, DuplicateKeyError, ExecutionTimeout, ServerSelectionTimeoutError

from todo_api.errors import DuplicateError, InternalError
from todo_api.repositories import MongoTodoRepository, MongoUserRepository, store_errors


class TestStoreErrors:
    def test_duplicate_key(self) -> None:
        with pytest.raises(DuplicateError) as exc_info:
            with store_errors("taken"):
                raise DuplicateKeyError("E11000 duplicate key error")
        assert exc_info.value.message == "taken"
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("error", [ExecutionTimeout("slow"), ServerSelectionTimeoutError("no server")])
    def test_timeouts(self, error: Exception) -> None:
        with pytest.raises(InternalError) as exc_info:
            with store_errors():
                raise error
        assert exc_info.value.message == "Database operation timed out"

    def test_other_driver_errors(self) -> None:
        with pytest.raises(InternalError) as exc_info:
            with store_errors():
                raise AutoReconnect("connection reset")
        assert exc_info.value.message == "Database unavailable"
        assert exc_info.value.status_code == 500

    def test_non_driver_errors_pass_through(self) -> None:
        with pytest.raises(KeyError):
            with store_errors():
                raise KeyError("title")


class TestMalformedIds:
    """Malformed ids resolve to not-found before the collection is touched."""

    @pytest.mark.asyncio
    async def test_todo_lookups(self) -> None:
        repository = MongoTodoRepository(collection=None)
        assert await repository.find_one("nope", "owner") is None
        assert await repository.update("nope", "owner", {"title": "x"}) is None
        assert await repository.toggle("nope", "owner", now=None) is None
        assert await repository.delete("nope", "owner") is False

    @pytest.mark.asyncio
    async def test_user_lookup(self) -> None:
        repository = MongoUserRepository(collection=None)
        assert await repository.get_by_id("12345") is None
