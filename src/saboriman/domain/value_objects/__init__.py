"""Domain value objects."""

from .audio_files import (
    AUDIO_EXTENSIONS,
    COVER_FILE_NAMES,
    IMAGE_EXTENSIONS,
    file_suffix,
    is_audio_file,
    is_image_file,
)
from .genre_keywords import GENRE_KEYWORDS, UNKNOWN_GENRE, match_genre_keyword

__all__ = [
    "AUDIO_EXTENSIONS",
    "COVER_FILE_NAMES",
    "GENRE_KEYWORDS",
    "IMAGE_EXTENSIONS",
    "UNKNOWN_GENRE",
    "file_suffix",
    "is_audio_file",
    "is_image_file",
    "match_genre_keyword",
]
