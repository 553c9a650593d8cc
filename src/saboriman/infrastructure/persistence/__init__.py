"""Infrastructure persistence layer."""

from .database import Database
from .models import (
    AlbumModel,
    Base,
    TrackModel,
    UserModel,
    generate_short_id,
)
from .repositories import (
    AlbumRepository,
    TrackRepository,
    UserRepository,
)

__all__ = [
    # Database
    "Database",
    "Base",
    # Models
    "AlbumModel",
    "TrackModel",
    "UserModel",
    "generate_short_id",
    # Repositories
    "AlbumRepository",
    "TrackRepository",
    "UserRepository",
]
