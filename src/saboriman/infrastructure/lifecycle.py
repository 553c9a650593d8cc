"""Application lifecycle management for startup and shutdown tasks.

This module handles the FastAPI lifespan context manager that orchestrates
application initialization and cleanup.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from saboriman.application.workers.library_scan_worker import LibraryScanWorker
from saboriman.config import Settings
from saboriman.domain.exceptions import ConfigurationError
from saboriman.infrastructure.observability import configure_logging
from saboriman.infrastructure.persistence import Database, UserRepository

logger = logging.getLogger(__name__)


# Hey future me, this validates SQLite paths BEFORE we create the engine. SQLite needs to create
# temp files (-journal, -wal) next to the .db file, so the directory must exist AND be writable.
# We DON'T pre-create the .db file, SQLite initializes it on first connection. Only runs for
# SQLite file URLs.
def _validate_sqlite_path(settings: Settings) -> None:
    """Validate SQLite database directory accessibility before engine creation."""
    db_path = settings._get_sqlite_db_path()
    if db_path is None:
        return

    directory = db_path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
        test_file = directory / f".{db_path.stem}_write_test"
        test_file.write_bytes(b"test")
        test_file.unlink()
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to write files in database directory '{directory}': {exc}. "
            "Update SABORIMAN_DATABASE__URL or adjust directory permissions."
        ) from exc
    logger.debug("Verified SQLite directory is writable: %s", directory)


# Listen future me, everything before `yield` runs at STARTUP, everything after at SHUTDOWN.
# Settings (and optionally a prober factory for tests) are put on app.state by create_app()
# BEFORE the lifespan runs. The startup scan is fire-and-forget: the server starts accepting
# requests while the library is still being walked.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown tasks including:
    - Logging configuration
    - Database initialization and table creation
    - System account bootstrap
    - Library scan worker and the optional startup scan
    - Resource cleanup
    """
    settings: Settings = app.state.settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    settings.ensure_directories()
    _validate_sqlite_path(settings)

    db = Database(settings)
    app.state.db = db
    worker: LibraryScanWorker | None = None
    try:
        await db.create_tables()
        logger.info("Database initialized: %s", settings.database.url)

        async with db.session_scope() as session:
            _user, created = await UserRepository(session).ensure_system_user(
                settings.scanner.system_user_id
            )
        if created:
            logger.info("Created system account %s", settings.scanner.system_user_id)

        worker = LibraryScanWorker(
            db=db,
            settings=settings,
            prober_factory=getattr(app.state, "prober_factory", None),
        )
        app.state.library_scan_worker = worker

        if settings.storage.music_path is None:
            logger.warning("No music library configured, scanning disabled")
        elif settings.scanner.scan_on_startup:
            await worker.trigger()

        yield
    finally:
        logger.info("Shutting down application")
        if worker is not None:
            await worker.shutdown()
        await db.close()
        logger.info("Database connection closed")
