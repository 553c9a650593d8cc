"""Tests for application settings."""

from pathlib import Path

import pytest

from saboriman.config import Settings


class TestSettings:
    """Test Settings defaults and environment loading."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)  # no stray .env
        settings = Settings()
        assert settings.app_name == "saboriman"
        assert settings.storage.music_path is None
        assert settings.storage.covers_path is None
        assert settings.scanner.probe_timeout_seconds == 10.0
        assert settings.scanner.system_user_id == "SYSTEM"
        assert settings.api.port == 8180

    def test_nested_env_vars(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SABORIMAN_STORAGE__MUSIC_PATH", str(tmp_path))
        monkeypatch.setenv("SABORIMAN_SCANNER__SCAN_ON_STARTUP", "false")
        monkeypatch.setenv("SABORIMAN_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.storage.music_path == tmp_path
        assert settings.storage.covers_path == tmp_path / ".covers"
        assert settings.scanner.scan_on_startup is False
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(log_level="chatty")

    def test_sqlite_db_path(self, tmp_path: Path) -> None:
        db_file = tmp_path / "data" / "lib.db"
        settings = Settings(database={"url": f"sqlite+aiosqlite:///{db_file}"})
        assert settings._get_sqlite_db_path() == db_file

    def test_memory_db_has_no_path(self) -> None:
        settings = Settings(database={"url": "sqlite+aiosqlite:///:memory:"})
        assert settings._get_sqlite_db_path() is None

    def test_ensure_directories_creates_db_parent(self, tmp_path: Path) -> None:
        db_file = tmp_path / "nested" / "dir" / "lib.db"
        settings = Settings(database={"url": f"sqlite+aiosqlite:///{db_file}"})
        settings.ensure_directories()
        assert db_file.parent.is_dir()
