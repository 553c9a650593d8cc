"""Application settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Annotated[
    Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    BeforeValidator(lambda v: v.upper() if isinstance(v, str) else v),
]


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite+aiosqlite:///./saboriman.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Echo SQL statements")
    pool_pre_ping: bool = Field(default=True, description="Ping before checkout")
    # Pool settings only apply to PostgreSQL/MySQL, SQLite ignores them
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    pool_recycle: int = Field(default=3600, ge=-1)


class StorageSettings(BaseModel):
    """Filesystem locations."""

    # Hey future me - music_path is the LIBRARY ROOT the scanner walks. It's optional
    # on purpose: without it the app still serves the catalog, it just never scans.
    music_path: Path | None = Field(default=None, description="Music library root")
    covers_dir_name: str = Field(
        default=".covers",
        description="Subdirectory of the library root for extracted cover art",
    )

    @property
    def covers_path(self) -> Path | None:
        if self.music_path is None:
            return None
        return self.music_path / self.covers_dir_name


class ScannerSettings(BaseModel):
    """Library scanner behaviour."""

    scan_on_startup: bool = Field(
        default=True, description="Run one background scan when the app starts"
    )
    probe_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Upper bound for a single ffprobe call"
    )
    ffprobe_binary: str = Field(default="ffprobe", description="ffprobe executable")
    system_user_id: str = Field(
        default="SYSTEM", description="Reserved account owning scanned tracks"
    )


class APISettings(BaseModel):
    """HTTP server settings."""

    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8180, description="Server port")


class ObservabilitySettings(BaseModel):
    """Logging output settings."""

    log_json_format: bool = Field(
        default=False, description="Emit JSON logs instead of human-readable lines"
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SABORIMAN_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="saboriman", description="Application name")
    app_env: Literal["development", "production", "test"] = Field(
        default="development", description="Deployment environment"
    )
    log_level: LogLevel = Field(default="INFO", description="Log level")

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    scanner: ScannerSettings = Field(default_factory=ScannerSettings)
    api: APISettings = Field(default_factory=APISettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def _get_sqlite_db_path(self) -> Path | None:
        """Return the SQLite database file path, or None for other backends."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path == ":memory:" or path.startswith("file:"):
            return None
        return Path(path)

    def ensure_directories(self) -> None:
        """Create the SQLite database directory if needed."""
        db_path = self._get_sqlite_db_path()
        if db_path is not None and str(db_path.parent) not in ("", "."):
            db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
