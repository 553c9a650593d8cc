# Hey future me - this worker runs library scans as DETACHED background tasks!
# The HTTP trigger and the startup hook both call trigger() and return immediately.
# One asyncio.Lock per library root: a second trigger for the same root while a scan is
# running is REJECTED (ScanInProgressError → 409), never queued, never run twice.
# Each scan gets a fresh DB session via session_scope(), so a fatal error rolls back
# exactly that scan and nothing else.
"""Library scan worker for background scanning."""

import asyncio
import logging
import uuid
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from saboriman.config import Settings
from saboriman.domain.entities import ScanResult, ScanState
from saboriman.domain.exceptions import ConfigurationError, ScanInProgressError
from saboriman.domain.ports import IAudioProber
from saboriman.infrastructure.observability.logging import set_correlation_id

if TYPE_CHECKING:
    from saboriman.infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)


class LibraryScanWorker:
    """Launches and tracks background library scans.

    Call shutdown() on app exit so running scans are cancelled.
    """

    def __init__(
        self,
        db: "Database",
        settings: Settings,
        prober_factory: Callable[[], IAudioProber] | None = None,
    ) -> None:
        """Initialize worker.

        Args:
            db: Database instance for creating sessions
            settings: Application settings
            prober_factory: Builds the prober for each scan (tests inject fakes)
        """
        self.db = db
        self.settings = settings
        self._prober_factory = prober_factory
        self._locks: dict[str, asyncio.Lock] = {}
        self._tasks: dict[str, asyncio.Task[ScanResult]] = {}
        self.last_result: ScanResult | None = None

    def _resolve_root(self, library_root: Path | None) -> Path:
        root = library_root or self.settings.storage.music_path
        if root is None:
            raise ConfigurationError("No music library configured")
        return Path(root).resolve()

    def is_running(self, library_root: Path | None = None) -> bool:
        """Check if a scan of the root (or any root, when None) is running."""
        if library_root is None:
            return any(lock.locked() for lock in self._locks.values())
        lock = self._locks.get(str(Path(library_root).resolve()))
        return lock is not None and lock.locked()

    @property
    def running(self) -> bool:
        return self.is_running()

    async def trigger(self, library_root: Path | None = None) -> Path:
        """Start a background scan and return without waiting for it.

        Returns:
            The resolved library root being scanned

        Raises:
            ConfigurationError: If no library root is configured
            ScanInProgressError: If a scan of that root is already running
        """
        root = self._resolve_root(library_root)
        key = str(root)
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            raise ScanInProgressError(key)

        # Acquire BEFORE creating the task so two triggers in the same tick can't both
        # pass the locked() check above.
        await lock.acquire()
        task = asyncio.create_task(self._run(root, lock), name=f"library-scan:{key}")
        self._tasks[key] = task
        logger.info(f"Library scan triggered for {key}")
        return root

    async def _run(self, root: Path, lock: asyncio.Lock) -> ScanResult:
        from saboriman.application.services.library_scanner_service import (
            LibraryScannerService,
        )

        set_correlation_id(f"scan-{uuid.uuid4().hex[:8]}")
        result = ScanResult(library_root=str(root))
        try:
            async with self.db.session_scope() as session:
                prober = self._prober_factory() if self._prober_factory else None
                service = LibraryScannerService(
                    session=session,
                    settings=self.settings,
                    prober=prober,
                    library_root=root,
                )
                result = service.result
                await service.scan_library()
        except asyncio.CancelledError:
            result.state = ScanState.FAILED
            result.error = "Scan cancelled"
            logger.warning(f"Library scan of {root} cancelled, changes rolled back")
            raise
        except Exception as e:
            # Scanner already logged the traceback; transaction is rolled back by now
            result.state = ScanState.FAILED
            result.error = result.error or str(e)
            logger.error(f"Library scan of {root} failed and was rolled back: {e}")
        finally:
            self.last_result = result
            self._tasks.pop(str(root), None)
            lock.release()
        return result

    async def wait(self, library_root: Path | None = None) -> ScanResult | None:
        """Wait for the running scan of a root (tests and shutdown)."""
        key = str(self._resolve_root(library_root))
        task = self._tasks.get(key)
        if task is None:
            return self.last_result
        return await task

    async def shutdown(self) -> None:
        """Cancel all running scans and wait for them to unwind."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} running library scan(s)")
