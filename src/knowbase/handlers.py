"""IPC handlers for daily todos.

These are the only entry points the UI process calls. Each handler returns the
envelope ``{"success": True, "data": ...}`` or ``{"success": False, "error": ...}``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from knowbase.dailytodos.errors import DailyTodoError

if TYPE_CHECKING:
    from knowbase.dailytodos.engine import RolloverEngine

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[dict]]


async def _envelope(call: Awaitable[Any]) -> dict:
    try:
        result = await call
    except DailyTodoError as e:
        return {"success": False, "error": str(e)}
    except Exception as e:
        logger.error("Daily todo handler failed: %s", e)
        return {"success": False, "error": str(e)}
    if hasattr(result, "to_dict"):
        result = result.to_dict()
    return {"success": True, "data": result}


def get_daily_todo_handlers(engine: RolloverEngine) -> dict[str, Handler]:
    """Return a dict of channel name -> async handler."""

    async def list_todos() -> dict:
        """List active todos after any due rollover."""
        return await _envelope(engine.list())

    async def create(todo_data: dict) -> dict:
        """Create a todo from ``{"title": ...}``."""
        return await _envelope(engine.create((todo_data or {}).get("title", "")))

    async def toggle_complete(todo_id: str) -> dict:
        return await _envelope(engine.toggle_complete(todo_id))

    async def delete(todo_id: str) -> dict:
        return await _envelope(engine.delete(todo_id))

    async def rollover() -> dict:
        """Manually trigger the rollover."""
        return await _envelope(engine.rollover())

    async def get_archive(options: dict | None = None) -> dict:
        """Query archived todos: ``{fromDate?, toDate?, offset?, limit?}``."""
        options = options or {}
        return await _envelope(
            engine.get_archive(
                from_date=options.get("fromDate"),
                to_date=options.get("toDate"),
                offset=options.get("offset") or 0,
                limit=options.get("limit"),
            )
        )

    async def update_priority(todo_id: str, priority: str) -> dict:
        return await _envelope(engine.update_priority(todo_id, priority))

    return {
        "dailyTodos.list": list_todos,
        "dailyTodos.create": create,
        "dailyTodos.toggleComplete": toggle_complete,
        "dailyTodos.delete": delete,
        "dailyTodos.rollover": rollover,
        "dailyTodos.getArchive": get_archive,
        "dailyTodos.updatePriority": update_priority,
    }


async def dispatch(handlers: dict[str, Handler], channel: str, *args: Any) -> dict:
    """Invoke the handler registered for ``channel``."""
    handler = handlers.get(channel)
    if handler is None:
        return {"success": False, "error": f"UNKNOWN_CHANNEL: {channel}"}
    return await handler(*args)
