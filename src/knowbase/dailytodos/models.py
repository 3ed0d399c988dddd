"""Records stored in the daily todo documents.

JSON keys are camelCase. Loading validates every field the rollover depends on
and raises ValueError/KeyError, which the store reports as its parse error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from knowbase.dailytodos.clock import date_of, days_between, parse_date
from knowbase.dailytodos.priority import DEFAULT_PRIORITY

DEFAULT_RETENTION_DAYS = 30


def _require_date(data: dict, key: str) -> str:
    """Return ``data[key]`` after checking it is a ``YYYY-MM-DD`` string."""
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a date string, got {value!r}")
    parse_date(value)
    return value


def _require_timestamp(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValueError(f"{key} is required, got {value!r}")
    date_of(value)
    return value


@dataclass
class DailyTodo:
    """An item on the active list."""

    id: str
    title: str
    created_at: str
    created_date: str
    priority: str = DEFAULT_PRIORITY
    completed: bool = False
    completed_at: str | None = None
    days_overdue: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> DailyTodo:
        completed = bool(data.get("completed", False))
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            created_at=_require_timestamp(data, "createdAt"),
            created_date=_require_date(data, "createdDate"),
            priority=data.get("priority", DEFAULT_PRIORITY),
            completed=completed,
            # A completed item must say when, or it cannot be archived.
            completed_at=_require_timestamp(data, "completedAt") if completed else None,
            days_overdue=int(data.get("daysOverdue") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority,
            "completed": self.completed,
            "completedAt": self.completed_at,
            "createdAt": self.created_at,
            "createdDate": self.created_date,
            "daysOverdue": self.days_overdue,
        }

    def archive(self, archived_date: date) -> ArchivedTodo:
        """Freeze a completed item into its archive record."""
        if not self.completed or not self.completed_at:
            raise ValueError(f"Cannot archive incomplete todo {self.id}")
        return ArchivedTodo(
            id=self.id,
            title=self.title,
            priority=self.priority,
            completed_at=self.completed_at,
            created_at=self.created_at,
            created_date=self.created_date,
            archived_date=archived_date.isoformat(),
            days_to_complete=days_between(
                parse_date(self.created_date), date_of(self.completed_at)
            ),
        )


@dataclass(frozen=True)
class ArchivedTodo:
    """A completed item removed from the active list. Immutable."""

    id: str
    title: str
    priority: str
    completed_at: str
    created_at: str
    created_date: str
    archived_date: str
    days_to_complete: int

    @classmethod
    def from_dict(cls, data: dict) -> ArchivedTodo:
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            priority=data.get("priority", DEFAULT_PRIORITY),
            completed_at=data.get("completedAt", ""),
            created_at=data.get("createdAt", ""),
            created_date=data.get("createdDate", ""),
            archived_date=_require_date(data, "archivedDate"),
            days_to_complete=int(data.get("daysToComplete") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "priority": self.priority,
            "completedAt": self.completed_at,
            "createdAt": self.created_at,
            "createdDate": self.created_date,
            "archivedDate": self.archived_date,
            "daysToComplete": self.days_to_complete,
        }


@dataclass
class ActiveDocument:
    """Contents of daily-todos.json."""

    last_rollover_date: str
    todos: list[DailyTodo] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> ActiveDocument:
        return cls(
            last_rollover_date=_require_date(data, "lastRolloverDate"),
            todos=[DailyTodo.from_dict(t) for t in data.get("dailyTodos", [])],
        )

    def to_dict(self) -> dict:
        return {
            "dailyTodos": [t.to_dict() for t in self.todos],
            "lastRolloverDate": self.last_rollover_date,
        }

    def find(self, todo_id: str) -> DailyTodo | None:
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        return None


@dataclass
class ArchiveDocument:
    """Contents of daily-todos-archive.json."""

    archived: list[ArchivedTodo] = field(default_factory=list)
    retention_days: int = DEFAULT_RETENTION_DAYS

    @classmethod
    def from_dict(cls, data: dict) -> ArchiveDocument:
        retention = data.get("retentionDays")
        return cls(
            archived=[ArchivedTodo.from_dict(t) for t in data.get("archivedTodos", [])],
            retention_days=int(retention) if retention is not None else DEFAULT_RETENTION_DAYS,
        )

    def to_dict(self) -> dict:
        return {
            "archivedTodos": [t.to_dict() for t in self.archived],
            "retentionDays": self.retention_days,
        }
