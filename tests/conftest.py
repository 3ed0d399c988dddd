"""Shared fixtures: a controllable clock and an engine on a temp directory."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

from knowbase.dailytodos.engine import RolloverEngine


class FakeClock:
    """Clock pinned to a settable instant."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.current += timedelta(days=days, hours=hours)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 29, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "storage" / ".knowledgebase"


@pytest.fixture
def engine(data_dir: Path, clock: FakeClock) -> RolloverEngine:
    return RolloverEngine(data_dir, clock=clock)
