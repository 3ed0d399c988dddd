"""Error taxonomy for daily todo operations.

Each error carries a stable ``code`` the UI layer can branch on.
"""

from __future__ import annotations


class DailyTodoError(Exception):
    """Base class; ``str(err)`` is ``CODE`` or ``CODE: detail``."""

    code = "DAILY_TODO_ERROR"

    def __init__(self, detail: str = "", *, code: str | None = None) -> None:
        if code:
            self.code = code
        self.detail = detail
        super().__init__(f"{self.code}: {detail}" if detail else self.code)


class ValidationError(DailyTodoError):
    """Bad caller input. Never retried automatically."""

    code = "VALIDATION_ERROR"


class DailyTodoNotFoundError(DailyTodoError):
    code = "DAILY_TODO_NOT_FOUND"


class StoreParseError(DailyTodoError):
    """A backing file exists but is not a valid document. Never auto-repaired."""

    code = "PARSE_ERROR"
