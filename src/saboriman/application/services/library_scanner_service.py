# Hey future me - this service reconciles the music folder with the catalog in ONE pass!
# Flow: ensure SYSTEM account → snapshot cataloged paths → walk tree → prune vanished.
# Everything runs inside the caller's session/transaction. If anything fatal happens we
# raise and the caller (LibraryScanWorker via Database.session_scope) rolls back ALL of it.
# Per-file problems never escalate: they're recorded in ScanResult.errors and we move on.
"""Library scanner service: sync the music folder into the catalog."""

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from saboriman.application.services.album_resolver import UNKNOWN_ARTIST, AlbumResolver
from saboriman.application.services.cover_resolver import CoverResolver
from saboriman.application.services.genre_inference import GenreInferencer
from saboriman.config import Settings
from saboriman.domain.entities import AudioFacts, ScanResult, ScanState
from saboriman.domain.exceptions import ProbeError, ScanAbortedError
from saboriman.domain.ports import IAudioProber
from saboriman.domain.value_objects import file_suffix, is_audio_file
from saboriman.infrastructure.audio import AudioProber
from saboriman.infrastructure.persistence.models import TrackModel
from saboriman.infrastructure.persistence.repositories import (
    TrackRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


class LibraryScannerService:
    """Scans one library root and reconciles it with the catalog.

    One instance = one scan pass. The album and cover caches live on the instance
    and are thrown away with it, so always build a fresh service per scan.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        prober: IAudioProber | None = None,
        library_root: Path | None = None,
    ) -> None:
        """Initialize scanner service.

        Args:
            session: Database session (the caller owns commit/rollback)
            settings: Application settings
            prober: Audio prober, defaults to the mutagen + ffprobe one
            library_root: Root to scan, defaults to settings.storage.music_path
        """
        self._session = session
        self.settings = settings
        self.prober: IAudioProber = prober or AudioProber(settings)
        root = library_root or settings.storage.music_path
        self.library_root = Path(os.path.abspath(root)) if root is not None else None

        self.user_repo = UserRepository(session)
        self.track_repo = TrackRepository(session)

        root_str = str(self.library_root) if self.library_root else ""
        self.result = ScanResult(library_root=root_str)

        self.covers_path = (self.library_root or Path(".")) / settings.storage.covers_dir_name
        self.cover_resolver = CoverResolver(self.covers_path)
        self.album_resolver = AlbumResolver(session, self.result)
        self.genre_inferencer = GenreInferencer(self.track_repo)

        # Tag reads and ffprobe block, so they go to a worker thread. Files are still
        # processed one at a time, the pool just keeps the event loop responsive.
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="scan-probe")

    # =========================================================================
    # MAIN SCAN METHOD
    # =========================================================================

    async def scan_library(self) -> ScanResult:
        """Run one full scan pass.

        Returns:
            ScanResult with state DONE

        Raises:
            ScanAbortedError: On fatal failures (missing root, no system account)
            Exception: Any unexpected error, the caller must roll back
        """
        result = self.result
        try:
            self._check_library_root()
            logger.info(f"Scanning library at: {self.library_root}")

            result.state = ScanState.ENSURE_SYSTEM_ACCOUNT
            await self._ensure_system_account()

            result.state = ScanState.SNAPSHOT_EXISTING
            existing = set(await self.track_repo.list_file_paths())
            logger.info(f"{len(existing)} tracks already cataloged")

            result.state = ScanState.WALK
            found = await self._walk(existing)

            result.state = ScanState.PRUNE
            await self._prune(existing - found)
        except Exception as e:
            result.state = ScanState.FAILED
            result.error = str(e)
            result.completed_at = datetime.now(UTC)
            logger.error(f"Library scan failed: {e}", exc_info=True)
            raise
        finally:
            self._executor.shutdown(wait=False)

        result.state = ScanState.DONE
        result.completed_at = datetime.now(UTC)
        logger.info(
            f"Library scan complete: {result.scanned_files} files scanned, "
            f"{result.added} added, {result.removed} removed, "
            f"{len(result.errors)} errors"
        )
        return result

    # =========================================================================
    # STATES
    # =========================================================================

    def _check_library_root(self) -> None:
        if self.library_root is None:
            raise ScanAbortedError("No music library configured")
        if not self.library_root.is_dir():
            raise ScanAbortedError(
                f"Library root is not a directory: {self.library_root}",
                path=str(self.library_root),
            )

    async def _ensure_system_account(self) -> None:
        user_id = self.settings.scanner.system_user_id
        try:
            _user, created = await self.user_repo.ensure_system_user(user_id)
        except SQLAlchemyError as e:
            raise ScanAbortedError(f"Cannot ensure system account {user_id}: {e}") from e
        if created:
            logger.info(f"Created system account {user_id}")

    async def _walk(self, existing: set[str]) -> set[str]:
        """Depth-first walk, importing every new audio file.

        Returns:
            Set of absolute paths of all files seen
        """
        found: set[str] = set()
        covers_dir = str(self.covers_path)

        def on_walk_error(error: OSError) -> None:
            message = f"Cannot read {error.filename}: {error.strerror or error}"
            logger.warning(message)
            self.result.add_error(message)

        for dirpath, dirnames, filenames in os.walk(
            str(self.library_root), onerror=on_walk_error
        ):
            # Sorted, in-place so os.walk follows the same order. Never descend into
            # our own extracted covers, so their files are not counted as scanned either.
            dirnames[:] = sorted(
                d for d in dirnames if os.path.join(dirpath, d) != covers_dir
            )
            for filename in sorted(filenames):
                file_path = os.path.join(dirpath, filename)
                found.add(file_path)
                self.result.scanned_files += 1

                if file_path in existing or not is_audio_file(filename):
                    continue

                if await self._import_file(file_path):
                    self.result.added += 1

        return found

    async def _prune(self, vanished: set[str]) -> None:
        """Delete tracks whose files disappeared. Albums are kept."""
        for file_path in sorted(vanished):
            removed = await self.track_repo.delete_by_file_path(file_path)
            self.result.removed += removed
            if removed:
                logger.info(f"Removed missing track: {file_path}")

    # =========================================================================
    # PER-FILE IMPORT
    # =========================================================================

    async def _import_file(self, file_path: str) -> bool:
        """Probe, resolve cover/album/genre and insert one track.

        Returns:
            True if the track was added
        """
        # Hey future me - os.walk hands back undecodable name bytes as lone surrogates.
        # The DB driver can't bind those (plain UnicodeEncodeError, not a SQLAlchemyError),
        # so such a file would escape the SAVEPOINT and roll back the whole scan.
        try:
            file_path.encode("utf-8")
        except UnicodeEncodeError:
            shown = os.fsencode(file_path).decode("utf-8", errors="replace")
            message = f"{shown}: file name is not valid UTF-8"
            logger.warning(f"Skipping file: {message}")
            self.result.add_error(message)
            return False

        loop = asyncio.get_running_loop()
        try:
            facts: AudioFacts = await loop.run_in_executor(
                self._executor, self.prober.probe, file_path
            )
        except ProbeError as e:
            message = f"{file_path}: {e.message}"
            logger.warning(f"Skipping file, probe failed: {message}")
            self.result.add_error(message)
            return False

        for warning in facts.warnings:
            self.result.add_error(warning)

        tags = facts.tags
        directory = os.path.dirname(file_path)
        cover_path = self.cover_resolver.resolve(directory, tags.picture)

        artist = tags.artist or UNKNOWN_ARTIST
        album_artist = tags.album_artist or artist
        album_id = await self.album_resolver.resolve(
            tags.album,
            album_artist,
            genre=tags.genre,
            year=tags.year,
            cover_path=cover_path,
        )
        genre = await self.genre_inferencer.infer(tags.genre, album_id, tags.album)

        track = TrackModel(
            file_path=file_path,
            title=tags.title or Path(file_path).stem,
            artist=artist,
            album_artist=album_artist,
            composer=tags.composer or None,
            performer=tags.performer or None,
            genre=genre,
            year=tags.year,
            release_date=tags.release_date or None,
            track_number=tags.track_number,
            disc_number=tags.disc_number,
            duration=facts.stream.duration_seconds,
            size=facts.file_size,
            suffix=file_suffix(file_path),
            bit_rate=facts.stream.bit_rate_kbps,
            sample_rate=facts.stream.sample_rate,
            bit_depth=facts.stream.bit_depth,
            channels=facts.stream.channels,
            has_cover_art=tags.picture is not None,
            cover_path=cover_path or None,
            label=tags.label or None,
            copyright=tags.copyright or None,
            isrc=tags.isrc or None,
            upc=tags.upc or None,
            album_id=album_id,
            user_id=self.settings.scanner.system_user_id,
        )

        try:
            async with self._session.begin_nested():
                await self.track_repo.add(track)
        except SQLAlchemyError as e:
            message = f"{file_path}: failed to save track: {e}"
            logger.warning(message)
            self.result.add_error(message)
            return False

        logger.debug(f"Added track: {track.artist} - {track.title}")
        return True
