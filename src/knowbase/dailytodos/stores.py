"""Active and archive stores, each one DurableRecord on disk."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from knowbase.dailytodos.clock import days_between, parse_date
from knowbase.dailytodos.durable import DurableRecord, FileSystem
from knowbase.dailytodos.models import (
    DEFAULT_RETENTION_DAYS,
    ActiveDocument,
    ArchiveDocument,
)

logger = logging.getLogger(__name__)

ACTIVE_FILENAME = "daily-todos.json"
ARCHIVE_FILENAME = "daily-todos-archive.json"


class ActiveStore:
    """Not-yet-archived todos plus ``lastRolloverDate``."""

    def __init__(self, data_dir: Path, fs: FileSystem | None = None) -> None:
        self._record: DurableRecord[ActiveDocument] = DurableRecord(
            data_dir / ACTIVE_FILENAME,
            decode=ActiveDocument.from_dict,
            encode=ActiveDocument.to_dict,
            parse_error_code="DAILY_TODOS_PARSE_ERROR",
            fs=fs,
        )

    @property
    def path(self) -> Path:
        return self._record.path

    def ensure_initialized(self, today: date) -> bool:
        """Write an empty document if none exists. Returns True if one was created."""
        if self._record.exists():
            return False
        self._record.save(self._empty(today))
        logger.info("Created active daily todo list at %s", self.path)
        return True

    def load(self, today: date) -> ActiveDocument:
        return self._record.load(lambda: self._empty(today))

    def save(self, doc: ActiveDocument) -> None:
        self._record.save(doc)

    @staticmethod
    def _empty(today: date) -> ActiveDocument:
        # A fresh list has nothing to roll over until tomorrow.
        return ActiveDocument(last_rollover_date=today.isoformat())


class ArchiveStore:
    """Archived todos plus the retention window."""

    def __init__(
        self,
        data_dir: Path,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        fs: FileSystem | None = None,
    ) -> None:
        self.default_retention_days = retention_days
        self._record: DurableRecord[ArchiveDocument] = DurableRecord(
            data_dir / ARCHIVE_FILENAME,
            decode=ArchiveDocument.from_dict,
            encode=ArchiveDocument.to_dict,
            parse_error_code="ARCHIVE_PARSE_ERROR",
            fs=fs,
        )

    @property
    def path(self) -> Path:
        return self._record.path

    def ensure_initialized(self) -> bool:
        if self._record.exists():
            return False
        self._record.save(self._empty())
        logger.info("Created daily todo archive at %s", self.path)
        return True

    def load(self) -> ArchiveDocument:
        return self._record.load(self._empty)

    def save(self, doc: ArchiveDocument) -> None:
        self._record.save(doc)

    def _empty(self) -> ArchiveDocument:
        return ArchiveDocument(retention_days=self.default_retention_days)


def cleanup_archive(doc: ArchiveDocument, today: date) -> int:
    """Drop archived items older than the retention window. Returns count removed."""
    kept = [
        t
        for t in doc.archived
        if days_between(parse_date(t.archived_date), today) <= doc.retention_days
    ]
    removed = len(doc.archived) - len(kept)
    doc.archived = kept
    if removed:
        logger.info("Purged %d archived todos older than %d days", removed, doc.retention_days)
    return removed
