"""Tests for the IPC handler table."""

import pytest

from knowbase.dailytodos.engine import RolloverEngine
from knowbase.handlers import dispatch, get_daily_todo_handlers


@pytest.fixture
def handlers(engine: RolloverEngine) -> dict:
    return get_daily_todo_handlers(engine)


class TestHandlers:
    def test_channel_names(self, handlers: dict):
        assert set(handlers) == {
            "dailyTodos.list",
            "dailyTodos.create",
            "dailyTodos.toggleComplete",
            "dailyTodos.delete",
            "dailyTodos.rollover",
            "dailyTodos.getArchive",
            "dailyTodos.updatePriority",
        }

    @pytest.mark.asyncio
    async def test_create_and_list(self, handlers: dict):
        created = await dispatch(handlers, "dailyTodos.create", {"title": "Buy milk"})
        assert created["success"] is True
        assert created["data"]["title"] == "Buy milk"
        assert created["data"]["priority"] == "medium"
        assert created["data"]["daysOverdue"] == 0

        listed = await dispatch(handlers, "dailyTodos.list")
        assert listed["success"] is True
        assert listed["data"]["lastRolloverDate"] == "2026-01-29"
        assert [t["title"] for t in listed["data"]["todos"]] == ["Buy milk"]

    @pytest.mark.asyncio
    async def test_validation_error_envelope(self, handlers: dict):
        result = await dispatch(handlers, "dailyTodos.create", {"title": "   "})
        assert result == {
            "success": False,
            "error": "VALIDATION_ERROR: Title cannot be empty",
        }

    @pytest.mark.asyncio
    async def test_not_found_envelope(self, handlers: dict):
        result = await dispatch(handlers, "dailyTodos.toggleComplete", "nope")
        assert result == {"success": False, "error": "DAILY_TODO_NOT_FOUND"}

    @pytest.mark.asyncio
    async def test_update_priority(self, handlers: dict):
        created = await dispatch(handlers, "dailyTodos.create", {"title": "x"})
        todo_id = created["data"]["id"]
        result = await dispatch(handlers, "dailyTodos.updatePriority", todo_id, "critical")
        assert result == {"success": True, "data": {"id": todo_id, "priority": "critical"}}

        bad = await dispatch(handlers, "dailyTodos.updatePriority", todo_id, "urgent")
        assert bad["success"] is False
        assert bad["error"].startswith("VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_rollover_and_archive(self, handlers: dict, clock):
        created = await dispatch(handlers, "dailyTodos.create", {"title": "x"})
        await dispatch(handlers, "dailyTodos.toggleComplete", created["data"]["id"])
        clock.advance(days=1)

        rolled = await dispatch(handlers, "dailyTodos.rollover")
        assert rolled["data"] == {
            "rolledOver": True,
            "todosArchived": 1,
            "todosEscalated": 0,
            "newRolloverDate": "2026-01-30",
        }

        archive = await dispatch(handlers, "dailyTodos.getArchive", {"limit": 10})
        assert archive["success"] is True
        assert archive["data"]["total"] == 1
        assert archive["data"]["retentionDays"] == 30
        assert archive["data"]["items"][0]["archivedDate"] == "2026-01-30"
        assert archive["data"]["items"][0]["daysToComplete"] == 0

    @pytest.mark.asyncio
    async def test_get_archive_without_options(self, handlers: dict):
        result = await dispatch(handlers, "dailyTodos.getArchive")
        assert result["data"] == {"items": [], "total": 0, "retentionDays": 30}

    @pytest.mark.asyncio
    async def test_delete(self, handlers: dict):
        created = await dispatch(handlers, "dailyTodos.create", {"title": "x"})
        result = await dispatch(handlers, "dailyTodos.delete", created["data"]["id"])
        assert result == {"success": True, "data": {"deleted": True}}

    @pytest.mark.asyncio
    async def test_unknown_channel(self, handlers: dict):
        result = await dispatch(handlers, "dailyTodos.explode")
        assert result["success"] is False
        assert "UNKNOWN_CHANNEL" in result["error"]

    @pytest.mark.asyncio
    async def test_parse_error_envelope(self, handlers: dict, data_dir):
        (data_dir / "daily-todos.json").write_text("{broken")
        result = await dispatch(handlers, "dailyTodos.list")
        assert result["success"] is False
        assert result["error"].startswith("DAILY_TODOS_PARSE_ERROR")
