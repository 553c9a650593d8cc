"""File type classification for library scanning.

Hey future me - this is the single source of truth for "is this an audio file?"
and "is this an image?". The scanner walks EVERY file but only imports the ones
that pass is_audio_file(). Cover lookup uses is_image_file().
"""

from os import PathLike
from pathlib import Path

# Supported audio file extensions (lowercase, with dot)
AUDIO_EXTENSIONS = frozenset({".mp3", ".m4a", ".flac", ".ogg", ".wav"})

# Image extensions accepted as cover art (lowercase, with dot)
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})

# Conventional cover file names, in lookup priority order.
# Matched case-insensitively, so "Cover.JPG" and "FOLDER.png" count too.
COVER_FILE_NAMES: tuple[str, ...] = (
    "cover.jpg",
    "cover.jpeg",
    "cover.png",
    "folder.jpg",
    "folder.jpeg",
    "folder.png",
    "album.jpg",
    "album.jpeg",
    "album.png",
    "front.jpg",
    "front.jpeg",
    "front.png",
)


def is_audio_file(path: str | PathLike[str]) -> bool:
    """Check if a path has a supported audio extension.

    Args:
        path: File path or name

    Returns:
        True if the extension (case-insensitive) is in AUDIO_EXTENSIONS.
    """
    return Path(path).suffix.lower() in AUDIO_EXTENSIONS


def is_image_file(path: str | PathLike[str]) -> bool:
    """Check if a path has an image extension usable as cover art."""
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def file_suffix(path: str | PathLike[str]) -> str:
    """Lower-case extension without the dot ("song.FLAC" → "flac")."""
    return Path(path).suffix.lower().lstrip(".")
