"""Rollover engine: the public surface for daily todos.

Every operation runs under one engine-wide lock:

1. Capture "today" from the clock once
2. Load the active list (and the archive if a rollover is due)
3. Catch up on missed days, oldest first
4. Apply the requested mutation and save

so two calls straddling midnight cannot both see a stale ``lastRolloverDate``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from knowbase.dailytodos.clock import (
    Clock,
    SystemClock,
    days_between,
    format_timestamp,
    parse_date,
)
from knowbase.dailytodos.errors import DailyTodoNotFoundError, ValidationError
from knowbase.dailytodos.models import (
    DEFAULT_RETENTION_DAYS,
    ActiveDocument,
    ArchiveDocument,
    ArchivedTodo,
    DailyTodo,
)
from knowbase.dailytodos.priority import (
    DEFAULT_PRIORITY,
    PRIORITIES,
    is_valid,
    next_priority,
    rank,
)
from knowbase.dailytodos.stores import ActiveStore, ArchiveStore, cleanup_archive

if TYPE_CHECKING:
    from knowbase.config import KnowbaseConfig
    from knowbase.dailytodos.durable import FileSystem

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 500
DEFAULT_PAGE_SIZE = 50


@dataclass
class ListResult:
    todos: list[DailyTodo]
    last_rollover_date: str

    def to_dict(self) -> dict:
        return {
            "todos": [t.to_dict() for t in self.todos],
            "lastRolloverDate": self.last_rollover_date,
        }


@dataclass
class RolloverResult:
    rolled_over: bool
    todos_archived: int
    todos_escalated: int
    new_rollover_date: str

    def to_dict(self) -> dict:
        return {
            "rolledOver": self.rolled_over,
            "todosArchived": self.todos_archived,
            "todosEscalated": self.todos_escalated,
            "newRolloverDate": self.new_rollover_date,
        }


@dataclass
class ArchivePage:
    items: list[ArchivedTodo] = field(default_factory=list)
    total: int = 0
    retention_days: int = DEFAULT_RETENTION_DAYS

    def to_dict(self) -> dict:
        return {
            "items": [t.to_dict() for t in self.items],
            "total": self.total,
            "retentionDays": self.retention_days,
        }


def _created_key(todo: DailyTodo) -> datetime:
    try:
        moment = datetime.fromisoformat(todo.created_at.replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def sort_todos(todos: list[DailyTodo]) -> list[DailyTodo]:
    """Incomplete first, then priority (high first), days overdue (high first), age (old first)."""
    return sorted(
        todos,
        key=lambda t: (
            t.completed,
            -rank(t.priority),
            -t.days_overdue,
            _created_key(t),
        ),
    )


def _parse_filter_date(name: str, value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a YYYY-MM-DD date") from None


class RolloverEngine:
    """Daily todo list with lazy, idempotent, day-by-day rollover."""

    def __init__(
        self,
        data_dir: Path,
        *,
        clock: Clock | None = None,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        page_size: int = DEFAULT_PAGE_SIZE,
        fs: FileSystem | None = None,
    ) -> None:
        self.data_dir = data_dir
        self._clock = clock or SystemClock()
        self._page_size = page_size
        self._active = ActiveStore(data_dir, fs=fs)
        self._archive = ArchiveStore(data_dir, retention_days=retention_days, fs=fs)
        self._lock = asyncio.Lock()
        self._ensure_initialized()

    @classmethod
    def from_config(cls, config: KnowbaseConfig, clock: Clock | None = None) -> RolloverEngine:
        return cls(
            config.data_dir,
            clock=clock or SystemClock.from_name(config.daily_todos.timezone),
            retention_days=config.daily_todos.retention_days,
            page_size=config.daily_todos.page_size,
        )

    def _ensure_initialized(self) -> None:
        """First-run setup: create both documents if they are missing. Idempotent."""
        self._active.ensure_initialized(self._clock.today())
        self._archive.ensure_initialized()

    # ── Rollover ──────────────────────────────────────────────

    def _catch_up(self, doc: ActiveDocument, today: date) -> RolloverResult:
        """Roll ``doc`` forward to ``today`` if behind, persisting both stores."""
        last = parse_date(doc.last_rollover_date)
        if last >= today:
            logger.debug("Rollover not due (last=%s, today=%s)", last, today)
            return RolloverResult(False, 0, 0, doc.last_rollover_date)

        archive = self._archive.load()
        days_missed = days_between(last, today)
        archived, escalated = self._perform_rollover(doc, archive, days_missed, today)

        # Archive is committed before the active list; ids already archived
        # are skipped when a rollover is retried.
        self._archive.save(archive)
        self._active.save(doc)

        logger.info(
            "Rolled over %d day(s) to %s: %d archived, %d escalation(s)",
            days_missed,
            doc.last_rollover_date,
            archived,
            escalated,
        )
        return RolloverResult(True, archived, escalated, doc.last_rollover_date)

    def _perform_rollover(
        self,
        doc: ActiveDocument,
        archive: ArchiveDocument,
        days_missed: int,
        today: date,
    ) -> tuple[int, int]:
        archived = 0
        escalated = 0
        known = {t.id for t in archive.archived}

        for _ in range(days_missed):
            keep: list[DailyTodo] = []
            for todo in doc.todos:
                if todo.completed:
                    # Every catch-up day stamps the date the rollover ran.
                    if todo.id not in known:
                        archive.archived.append(todo.archive(today))
                        known.add(todo.id)
                        archived += 1
                    continue
                if not is_valid(todo.priority):
                    logger.warning(
                        "Todo %s has unknown priority %r, resetting to %s",
                        todo.id,
                        todo.priority,
                        DEFAULT_PRIORITY,
                    )
                todo.days_overdue += 1
                todo.priority = next_priority(todo.priority)
                escalated += 1
                keep.append(todo)
            doc.todos = keep

        cleanup_archive(archive, today)
        doc.last_rollover_date = today.isoformat()
        return archived, escalated

    async def rollover(self) -> RolloverResult:
        """Run the rollover now if it is due."""
        async with self._lock:
            today = self._clock.today()
            doc = self._active.load(today)
            return self._catch_up(doc, today)

    # ── Public operations ─────────────────────────────────────

    async def list(self) -> ListResult:
        async with self._lock:
            today = self._clock.today()
            doc = self._active.load(today)
            self._catch_up(doc, today)
            return ListResult(sort_todos(doc.todos), doc.last_rollover_date)

    async def create(self, title: str) -> DailyTodo:
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Title cannot be empty")
        title = title.strip()
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(f"Title exceeds {MAX_TITLE_LENGTH} characters")

        async with self._lock:
            now = self._clock.now()
            today = now.date()
            doc = self._active.load(today)
            self._catch_up(doc, today)

            todo = DailyTodo(
                id=str(uuid.uuid4()),
                title=title,
                created_at=format_timestamp(now),
                created_date=today.isoformat(),
            )
            doc.todos.append(todo)
            self._active.save(doc)
            logger.debug("Created daily todo %s", todo.id)
            return todo

    async def toggle_complete(self, todo_id: str) -> dict:
        """Flip completion. Priority and days overdue are left alone."""
        async with self._lock:
            now = self._clock.now()
            doc = self._active.load(now.date())
            self._catch_up(doc, now.date())

            todo = doc.find(todo_id)
            if todo is None:
                raise DailyTodoNotFoundError()
            todo.completed = not todo.completed
            todo.completed_at = format_timestamp(now) if todo.completed else None
            self._active.save(doc)
            return {
                "id": todo.id,
                "completed": todo.completed,
                "completedAt": todo.completed_at,
            }

    async def delete(self, todo_id: str) -> dict:
        async with self._lock:
            today = self._clock.today()
            doc = self._active.load(today)
            self._catch_up(doc, today)

            todo = doc.find(todo_id)
            if todo is None:
                raise DailyTodoNotFoundError()
            doc.todos.remove(todo)
            self._active.save(doc)
            logger.debug("Deleted daily todo %s", todo_id)
            return {"deleted": True}

    async def update_priority(self, todo_id: str, priority: str) -> dict:
        """Set priority directly; the one path allowed to move it down."""
        if not is_valid(priority):
            raise ValidationError(f"Invalid priority value (expected one of {', '.join(PRIORITIES)})")

        async with self._lock:
            today = self._clock.today()
            doc = self._active.load(today)
            self._catch_up(doc, today)

            todo = doc.find(todo_id)
            if todo is None:
                raise DailyTodoNotFoundError()
            todo.priority = priority
            self._active.save(doc)
            return {"id": todo.id, "priority": todo.priority}

    async def get_archive(
        self,
        *,
        from_date: str | None = None,
        to_date: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> ArchivePage:
        """Archived todos in [from_date, to_date], newest archive date first."""
        start = _parse_filter_date("fromDate", from_date)
        end = _parse_filter_date("toDate", to_date)
        if limit is None:
            limit = self._page_size
        if not isinstance(offset, int) or offset < 0:
            raise ValidationError("offset must be a non-negative integer")
        if not isinstance(limit, int) or limit <= 0:
            raise ValidationError("limit must be a positive integer")

        async with self._lock:
            today = self._clock.today()
            doc = self._active.load(today)
            self._catch_up(doc, today)
            archive = self._archive.load()

        results = [
            t
            for t in archive.archived
            if (start is None or parse_date(t.archived_date) >= start)
            and (end is None or parse_date(t.archived_date) <= end)
        ]
        results.sort(key=lambda t: t.archived_date, reverse=True)
        return ArchivePage(
            items=results[offset : offset + limit],
            total=len(results),
            retention_days=archive.retention_days,
        )
