"""Tests for GenreInferencer fallback chain."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from saboriman.application.services.genre_inference import GenreInferencer


@pytest.fixture
def track_repo() -> MagicMock:
    repo = MagicMock()
    repo.most_common_genre = AsyncMock(return_value=None)
    return repo


class TestGenreInferencer:
    """Tag → album majority → album name keyword → Unknown."""

    @pytest.mark.asyncio
    async def test_tag_wins(self, track_repo: MagicMock) -> None:
        track_repo.most_common_genre.return_value = "Jazz"
        genre = await GenreInferencer(track_repo).infer("Rock", "ALB00001", "Soundtrack")
        assert genre == "Rock"
        track_repo.most_common_genre.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_album_majority(self, track_repo: MagicMock) -> None:
        track_repo.most_common_genre.return_value = "Jazz"
        genre = await GenreInferencer(track_repo).infer("", "ALB00001", "Demo")
        assert genre == "Jazz"
        track_repo.most_common_genre.assert_awaited_once_with("ALB00001")

    @pytest.mark.asyncio
    async def test_album_name_keyword(self, track_repo: MagicMock) -> None:
        genre = await GenreInferencer(track_repo).infer("", "ALB00001", "Movie Soundtrack")
        assert genre == "Soundtrack"

    @pytest.mark.asyncio
    async def test_no_album_skips_majority(self, track_repo: MagicMock) -> None:
        genre = await GenreInferencer(track_repo).infer("  ", None, "")
        assert genre == "Unknown"
        track_repo.most_common_genre.assert_not_awaited()
