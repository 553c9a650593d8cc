"""Tests for CoverResolver."""

import hashlib
from pathlib import Path

from saboriman.application.services.cover_resolver import CoverResolver
from saboriman.domain.entities import EmbeddedPicture


def touch(path: Path, data: bytes = b"img") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


class TestEmbeddedPictures:
    """Embedded pictures are written once, named by content hash."""

    def test_writes_md5_named_file(self, tmp_path: Path) -> None:
        resolver = CoverResolver(tmp_path / ".covers")
        album_dir = tmp_path / "A"
        album_dir.mkdir()

        cover = resolver.resolve(str(album_dir), EmbeddedPicture(b"picture", "png"))

        expected = tmp_path / ".covers" / f"{hashlib.md5(b'picture').hexdigest()}.png"
        assert cover == str(expected)
        assert expected.read_bytes() == b"picture"

    def test_unknown_extension_defaults_to_jpg(self, tmp_path: Path) -> None:
        resolver = CoverResolver(tmp_path / ".covers")
        cover = resolver.resolve(str(tmp_path), EmbeddedPicture(b"picture", ""))
        assert cover.endswith(".jpg")

    def test_identical_pictures_share_one_file(self, tmp_path: Path) -> None:
        resolver = CoverResolver(tmp_path / ".covers")
        first = resolver.resolve(str(tmp_path / "A"), EmbeddedPicture(b"same", "jpg"))
        second = resolver.resolve(str(tmp_path / "B"), EmbeddedPicture(b"same", "jpg"))

        assert first == second
        assert resolver.writes == 1
        assert len(list((tmp_path / ".covers").iterdir())) == 1

    def test_existing_file_is_not_rewritten(self, tmp_path: Path) -> None:
        covers = tmp_path / ".covers"
        digest = hashlib.md5(b"pic").hexdigest()
        existing = touch(covers / f"{digest}.jpg", b"pic")
        mtime = existing.stat().st_mtime_ns

        resolver = CoverResolver(covers)
        cover = resolver.resolve(str(tmp_path), EmbeddedPicture(b"pic", "jpg"))

        assert cover == str(existing)
        assert resolver.writes == 0
        assert existing.stat().st_mtime_ns == mtime

    def test_write_failure_falls_back_to_directory(self, tmp_path: Path) -> None:
        # A FILE where the covers directory should be makes mkdir fail
        blocker = touch(tmp_path / "blocked")
        album_dir = tmp_path / "A"
        folder_jpg = touch(album_dir / "folder.jpg")

        resolver = CoverResolver(blocker / ".covers")
        cover = resolver.resolve(str(album_dir), EmbeddedPicture(b"pic", "jpg"))

        assert cover == str(folder_jpg)


class TestDirectoryScan:
    """Directory fallback: conventional names, then first image."""

    def test_conventional_name_priority(self, tmp_path: Path) -> None:
        touch(tmp_path / "aaa.png")
        touch(tmp_path / "folder.jpg")
        cover = touch(tmp_path / "Cover.JPG")

        assert CoverResolver.find_in_directory(str(tmp_path)) == str(cover)

    def test_first_image_by_name(self, tmp_path: Path) -> None:
        touch(tmp_path / "zzz.webp")
        first = touch(tmp_path / "booklet-1.gif")
        touch(tmp_path / "01 - song.flac")

        assert CoverResolver.find_in_directory(str(tmp_path)) == str(first)

    def test_no_image(self, tmp_path: Path) -> None:
        touch(tmp_path / "song.flac")
        assert CoverResolver.find_in_directory(str(tmp_path)) == ""

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert CoverResolver.find_in_directory(str(tmp_path / "gone")) == ""


class TestCache:
    """One result per directory per resolver."""

    def test_result_is_cached_per_directory(self, tmp_path: Path) -> None:
        resolver = CoverResolver(tmp_path / ".covers")
        album_dir = tmp_path / "A"
        cover = touch(album_dir / "cover.jpg")

        assert resolver.resolve(str(album_dir)) == str(cover)
        cover.unlink()
        assert resolver.resolve(str(album_dir)) == str(cover)

    def test_miss_is_cached(self, tmp_path: Path) -> None:
        resolver = CoverResolver(tmp_path / ".covers")
        album_dir = tmp_path / "A"
        album_dir.mkdir()

        assert resolver.resolve(str(album_dir)) == ""
        touch(album_dir / "cover.jpg")
        assert resolver.resolve(str(album_dir)) == ""
