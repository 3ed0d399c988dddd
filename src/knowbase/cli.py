"""Terminal commands for the daily todo list."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from knowbase.dailytodos.errors import ValidationError

if TYPE_CHECKING:
    from knowbase.dailytodos.engine import RolloverEngine
    from knowbase.dailytodos.models import DailyTodo

_PRIORITY_MARK = {"low": " ", "medium": "!", "high": "!!", "critical": "!!!"}


def _format_todo(todo: DailyTodo) -> str:
    box = "[x]" if todo.completed else "[ ]"
    mark = _PRIORITY_MARK.get(todo.priority, "?")
    line = f"{box} {mark:<3} {todo.title}  ({todo.id[:8]})"
    if todo.days_overdue:
        line += f"  +{todo.days_overdue}d"
    return line


async def _resolve_id(engine: RolloverEngine, prefix: str) -> str:
    """Expand a short id prefix (as printed by ``list``) to the full id."""
    result = await engine.list()
    matches = [t.id for t in result.todos if t.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValidationError(f"Ambiguous id prefix '{prefix}'")
    return prefix


async def cmd_list(engine: RolloverEngine, args: list[str]) -> None:
    result = await engine.list()
    print(f"Daily todos (last rollover {result.last_rollover_date})")
    print("-" * 48)
    if not result.todos:
        print("(nothing for today)")
    for todo in result.todos:
        print(_format_todo(todo))


async def cmd_add(engine: RolloverEngine, args: list[str]) -> None:
    todo = await engine.create(" ".join(args))
    print(f"Added {todo.id[:8]}: {todo.title}")


async def cmd_done(engine: RolloverEngine, args: list[str]) -> None:
    if not args:
        raise ValidationError("usage: done <id>")
    result = await engine.toggle_complete(await _resolve_id(engine, args[0]))
    state = "done" if result["completed"] else "not done"
    print(f"{result['id'][:8]} marked {state}")


async def cmd_rm(engine: RolloverEngine, args: list[str]) -> None:
    if not args:
        raise ValidationError("usage: rm <id>")
    todo_id = await _resolve_id(engine, args[0])
    await engine.delete(todo_id)
    print(f"Deleted {todo_id[:8]}")


async def cmd_priority(engine: RolloverEngine, args: list[str]) -> None:
    if len(args) < 2:
        raise ValidationError("usage: priority <id> <low|medium|high|critical>")
    result = await engine.update_priority(await _resolve_id(engine, args[0]), args[1])
    print(f"{result['id'][:8]} priority -> {result['priority']}")


async def cmd_rollover(engine: RolloverEngine, args: list[str]) -> None:
    result = await engine.rollover()
    if not result.rolled_over:
        print(f"Already rolled over today ({result.new_rollover_date})")
        return
    print(
        f"Rolled over to {result.new_rollover_date}: "
        f"{result.todos_archived} archived, {result.todos_escalated} escalated"
    )


async def cmd_archive(engine: RolloverEngine, args: list[str]) -> None:
    from_date = args[0] if len(args) > 0 else None
    to_date = args[1] if len(args) > 1 else None
    page = await engine.get_archive(from_date=from_date, to_date=to_date)
    print(f"Archive: {page.total} item(s), kept for {page.retention_days} days")
    for item in page.items:
        print(
            f"{item.archived_date}  {item.title}  "
            f"({item.priority}, {item.days_to_complete}d to complete)"
        )
    if page.total > len(page.items):
        print(f"... {page.total - len(page.items)} more", file=sys.stderr)


COMMANDS = {
    "list": cmd_list,
    "add": cmd_add,
    "done": cmd_done,
    "rm": cmd_rm,
    "priority": cmd_priority,
    "rollover": cmd_rollover,
    "archive": cmd_archive,
}
