"""Tests for configuration loading."""

import pytest
from pathlib import Path

from knowbase.config import load_config

_ENV_KEYS = [
    "KNOWBASE_STORAGE_DIR",
    "KNOWBASE_LOG_LEVEL",
    "KNOWBASE_RETENTION_DAYS",
    "KNOWBASE_TIMEZONE",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert config.daily_todos.retention_days == 30
        assert config.daily_todos.timezone == "UTC"
        assert config.daily_todos.page_size == 50
        assert config.log_level == "INFO"
        assert config.data_dir == config.storage_dir / ".knowledgebase"

    def test_env_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("KNOWBASE_STORAGE_DIR", str(tmp_path / "kb"))
        monkeypatch.setenv("KNOWBASE_RETENTION_DAYS", "7")

        config = load_config()
        assert config.storage_dir == tmp_path / "kb"
        assert config.daily_todos.retention_days == 7

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "knowbase.toml"
        toml_path.write_text("""
storage_dir = "/srv/kb"
log_level = "DEBUG"

[daily_todos]
retention_days = 90
timezone = "Europe/Berlin"
page_size = 20
""")
        config = load_config(toml_path)
        assert config.storage_dir == Path("/srv/kb")
        assert config.log_level == "DEBUG"
        assert config.daily_todos.retention_days == 90
        assert config.daily_todos.timezone == "Europe/Berlin"
        assert config.daily_todos.page_size == 20

    def test_toml_discovered_in_cwd(self, tmp_path: Path):
        (tmp_path / "knowbase.toml").write_text("[daily_todos]\nretention_days = 14\n")
        assert load_config().daily_todos.retention_days == 14

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("KNOWBASE_TIMEZONE", "America/New_York")

        toml_path = tmp_path / "knowbase.toml"
        toml_path.write_text("""
[daily_todos]
timezone = "Asia/Tokyo"
""")
        config = load_config(toml_path)
        assert config.daily_todos.timezone == "America/New_York"  # env wins
