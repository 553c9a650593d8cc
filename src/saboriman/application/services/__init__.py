"""Application services."""

from .album_resolver import AlbumResolver
from .cover_resolver import CoverResolver
from .genre_inference import GenreInferencer
from .library_scanner_service import LibraryScannerService

__all__ = [
    "AlbumResolver",
    "CoverResolver",
    "GenreInferencer",
    "LibraryScannerService",
]
