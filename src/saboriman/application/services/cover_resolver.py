"""Cover art resolution for one scan pass."""

import hashlib
import logging
import os
from pathlib import Path

from saboriman.domain.entities import EmbeddedPicture
from saboriman.domain.value_objects import COVER_FILE_NAMES, is_image_file

logger = logging.getLogger(__name__)


class CoverResolver:
    """Finds (or extracts) the cover image for a directory.

    Hey future me - ONE instance per scan! The directory cache lives as long as the
    resolver, and it caches misses too ("" = this directory has no cover). So the
    first file of a directory decides the cover for all its siblings, exactly like a
    scan that goes folder by folder. Don't share an instance across scans or new
    cover files will never be picked up.
    """

    def __init__(self, covers_dir: Path) -> None:
        self.covers_dir = covers_dir
        self._cache: dict[str, str] = {}
        self.writes = 0

    def resolve(self, directory: str, picture: EmbeddedPicture | None = None) -> str:
        """Get the cover path for a directory.

        Args:
            directory: Directory containing the audio file
            picture: Embedded picture of the audio file, if any

        Returns:
            Absolute cover path, or "" when nothing was found
        """
        if directory in self._cache:
            return self._cache[directory]

        cover = ""
        if picture is not None and picture.data:
            cover = self._save_embedded(picture)
        if not cover:
            cover = self.find_in_directory(directory)

        self._cache[directory] = cover
        return cover

    def _save_embedded(self, picture: EmbeddedPicture) -> str:
        """Write embedded bytes as <md5>.<ext> unless that file already exists."""
        digest = hashlib.md5(picture.data).hexdigest()  # noqa: S324 - content key, not security
        ext = (picture.ext or "jpg").lower().lstrip(".")
        target = self.covers_dir / f"{digest}.{ext}"

        if target.exists():
            return str(target)

        try:
            self.covers_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(picture.data)
        except OSError as e:
            logger.warning(f"Failed to save embedded cover {target}: {e}")
            return ""

        self.writes += 1
        logger.debug(f"Saved embedded cover: {target}")
        return str(target)

    @staticmethod
    def find_in_directory(directory: str) -> str:
        """Look for a conventionally named cover, else the first image by name.

        Returns:
            Absolute image path, or "" when the directory has no image
        """
        try:
            names = sorted(entry.name for entry in os.scandir(directory) if entry.is_file())
        except OSError as e:
            logger.warning(f"Cannot list {directory} for cover art: {e}")
            return ""

        by_lower = {}
        for name in names:
            by_lower.setdefault(name.lower(), name)

        for candidate in COVER_FILE_NAMES:
            if candidate in by_lower:
                return os.path.join(directory, by_lower[candidate])

        for name in names:
            if is_image_file(name):
                return os.path.join(directory, name)

        return ""
