"""Tests for LibraryScanWorker (background scans with single-flight locks)."""

import asyncio
import threading
from pathlib import Path

import pytest

from saboriman.application.workers.library_scan_worker import LibraryScanWorker
from saboriman.config import Settings
from saboriman.domain.entities import ScanState
from saboriman.domain.exceptions import ConfigurationError, ScanInProgressError
from saboriman.infrastructure.persistence import Database
from tests.fakes import FakeProber, touch


class TestLibraryScanWorker:
    """Trigger, single flight, last result and shutdown."""

    @pytest.mark.asyncio
    async def test_trigger_runs_scan_in_background(
        self, db: Database, settings: Settings, music_dir: Path
    ) -> None:
        touch(music_dir / "A" / "song.flac")
        worker = LibraryScanWorker(db, settings, prober_factory=FakeProber)

        root = await worker.trigger()
        assert root == music_dir.resolve()
        assert worker.running is True

        result = await worker.wait()

        assert worker.running is False
        assert result is worker.last_result
        assert result.state == ScanState.DONE
        assert result.added == 1

    @pytest.mark.asyncio
    async def test_second_trigger_is_rejected(
        self, db: Database, settings: Settings, music_dir: Path
    ) -> None:
        touch(music_dir / "song.flac")
        worker = LibraryScanWorker(db, settings, prober_factory=FakeProber)

        await worker.trigger()
        with pytest.raises(ScanInProgressError):
            await worker.trigger()
        await worker.wait()

        # Lock is released once the scan is done
        await worker.trigger()
        result = await worker.wait()
        assert result.added == 0

    @pytest.mark.asyncio
    async def test_no_library_root(self, db: Database, settings: Settings) -> None:
        settings.storage.music_path = None
        worker = LibraryScanWorker(db, settings)

        with pytest.raises(ConfigurationError):
            await worker.trigger()

    @pytest.mark.asyncio
    async def test_failed_scan_is_recorded(
        self, db: Database, settings: Settings, tmp_path: Path
    ) -> None:
        worker = LibraryScanWorker(db, settings, prober_factory=FakeProber)

        await worker.trigger(tmp_path / "missing")
        result = await worker.wait(tmp_path / "missing")

        assert result.state == ScanState.FAILED
        assert "not a directory" in result.error
        assert worker.running is False

    @pytest.mark.asyncio
    async def test_shutdown_cancels_running_scan(
        self, db: Database, settings: Settings, music_dir: Path
    ) -> None:
        touch(music_dir / "song.flac")
        gate = threading.Event()
        worker = LibraryScanWorker(
            db, settings, prober_factory=lambda: FakeProber(gate=gate)
        )

        await worker.trigger()
        await asyncio.sleep(0.05)
        shutdown = asyncio.create_task(worker.shutdown())
        await asyncio.sleep(0.05)
        gate.set()
        await shutdown

        assert worker.running is False
        assert worker.last_result.state == ScanState.FAILED
        assert worker.last_result.error == "Scan cancelled"
