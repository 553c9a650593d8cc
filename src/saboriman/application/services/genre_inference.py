"""Genre fallback chain for tracks without a genre tag."""

import logging

from saboriman.domain.value_objects import UNKNOWN_GENRE, match_genre_keyword
from saboriman.infrastructure.persistence.repositories import TrackRepository

logger = logging.getLogger(__name__)


class GenreInferencer:
    """Resolve a track's genre: tag → album majority → album name keyword → Unknown."""

    def __init__(self, track_repo: TrackRepository) -> None:
        self.track_repo = track_repo

    async def infer(self, tag_genre: str, album_id: str | None, album_name: str) -> str:
        """Pick the first non-empty genre of the fallback chain.

        Args:
            tag_genre: Genre from the track's own tags
            album_id: Album the track belongs to (None = no album)
            album_name: Album name used for keyword matching

        Returns:
            Genre label, never empty
        """
        if tag_genre.strip():
            return tag_genre.strip()

        if album_id:
            majority = await self.track_repo.most_common_genre(album_id)
            if majority:
                return majority

        keyword_genre = match_genre_keyword(album_name)
        if keyword_genre:
            logger.debug(f"Genre '{keyword_genre}' inferred from album name '{album_name}'")
            return keyword_genre

        return UNKNOWN_GENRE
