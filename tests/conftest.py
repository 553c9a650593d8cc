"""Shared fixtures: temp SQLite database and settings pointing at a temp library."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from saboriman.config import Settings
from saboriman.infrastructure.persistence import Database


@pytest.fixture
def music_dir(tmp_path: Path) -> Path:
    path = tmp_path / "music"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, music_dir: Path) -> Settings:
    return Settings(
        app_env="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"},
        storage={"music_path": music_dir},
        scanner={"scan_on_startup": False},
    )


@pytest_asyncio.fixture
async def db(settings: Settings) -> AsyncGenerator[Database, None]:
    database = Database(settings)
    await database.create_tables()
    yield database
    await database.close()
