"""Configuration loading from environment variables and knowbase.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_STORAGE_DIR = Path.home() / "KnowledgeBase"
_CONFIG_FILENAME = "knowbase.toml"


@dataclass
class DailyTodosConfig:
    """Daily todo rollover configuration."""

    retention_days: int = 30
    timezone: str = "UTC"
    page_size: int = 50


@dataclass
class KnowbaseConfig:
    """Top-level knowbase configuration."""

    daily_todos: DailyTodosConfig = field(default_factory=DailyTodosConfig)
    storage_dir: Path = _DEFAULT_STORAGE_DIR
    log_level: str = "INFO"

    @property
    def data_dir(self) -> Path:
        """Application-owned directory holding the JSON documents."""
        return self.storage_dir / ".knowledgebase"


def load_config(config_path: Path | None = None) -> KnowbaseConfig:
    """Load configuration from environment variables and optional knowbase.toml.

    Priority: environment variables > knowbase.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.knowbase/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".knowbase" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    daily_data = file_data.get("daily_todos", {})

    config = KnowbaseConfig(
        daily_todos=DailyTodosConfig(
            retention_days=int(
                os.getenv("KNOWBASE_RETENTION_DAYS", daily_data.get("retention_days", 30))
            ),
            timezone=os.getenv("KNOWBASE_TIMEZONE", daily_data.get("timezone", "UTC")),
            page_size=int(daily_data.get("page_size", 50)),
        ),
        storage_dir=Path(
            os.getenv(
                "KNOWBASE_STORAGE_DIR",
                file_data.get("storage_dir", str(_DEFAULT_STORAGE_DIR)),
            )
        ).expanduser(),
        log_level=os.getenv("KNOWBASE_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
