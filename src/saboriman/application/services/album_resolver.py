"""Album lookup/creation for one scan pass."""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from saboriman.domain.entities import ScanResult
from saboriman.infrastructure.persistence.models import AlbumModel
from saboriman.infrastructure.persistence.repositories import AlbumRepository

logger = logging.getLogger(__name__)

UNKNOWN_ARTIST = "unknown"


@dataclass
class _CachedAlbum:
    album_id: str
    has_cover: bool


def album_key(name: str, artist: str) -> str:
    """Cache key of an album: "<name>::<artist>"."""
    return f"{name}::{artist}"


class AlbumResolver:
    """Maps (album name, artist) to an album id, creating albums on first sight.

    Hey future me - the cache holds ids and a "has cover" flag, NOT ORM objects.
    A rolled-back SAVEPOINT expires the objects it touched, and touching an expired
    attribute under AsyncSession blows up with MissingGreenlet. Ids are safe.
    """

    def __init__(self, session: AsyncSession, result: ScanResult | None = None) -> None:
        self.session = session
        self.album_repo = AlbumRepository(session)
        self.result = result
        self._cache: dict[str, _CachedAlbum] = {}

    async def resolve(
        self,
        name: str,
        artist: str,
        genre: str = "",
        year: int = 0,
        cover_path: str = "",
    ) -> str | None:
        """Get the album id for (name, artist).

        Args:
            name: Album name (empty = track has no album)
            artist: Album artist, "unknown" is used when empty
            genre: Genre stored on a newly created album
            year: Release year, becomes Jan 1st of that year on a new album
            cover_path: Cover resolved for the track's directory

        Returns:
            Album id, or None if the track has no album or creation failed
        """
        if not name:
            return None
        artist = artist or UNKNOWN_ARTIST
        key = album_key(name, artist)

        cached = self._cache.get(key)
        if cached is None:
            existing = await self.album_repo.get_by_name_and_artist(name, artist)
            if existing is not None:
                cached = _CachedAlbum(existing.id, bool(existing.cover_path))
                self._cache[key] = cached

        if cached is not None:
            if not cached.has_cover and cover_path:
                await self._backfill_cover(cached, cover_path)
            return cached.album_id

        return await self._create(key, name, artist, genre, year, cover_path)

    async def _create(
        self,
        key: str,
        name: str,
        artist: str,
        genre: str,
        year: int,
        cover_path: str,
    ) -> str | None:
        album = AlbumModel(
            name=name,
            artist_name=artist,
            genre=genre or None,
            cover_path=cover_path or None,
            release_date=date(year, 1, 1) if 0 < year <= 9999 else None,
        )
        try:
            async with self.session.begin_nested():
                await self.album_repo.add(album)
        except SQLAlchemyError as e:
            message = f"Failed to create album '{name}' by '{artist}': {e}"
            logger.warning(message)
            if self.result is not None:
                self.result.add_error(message)
            return None

        album_id = album.id
        self._cache[key] = _CachedAlbum(album_id, bool(cover_path))
        logger.info(f"Created album: {name} - {artist}")
        return album_id

    async def _backfill_cover(self, cached: _CachedAlbum, cover_path: str) -> None:
        await self.album_repo.update_cover(cached.album_id, cover_path)
        cached.has_cover = True
        logger.debug(f"Backfilled cover for album {cached.album_id}: {cover_path}")
