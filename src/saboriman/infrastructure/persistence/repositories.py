"""Repository implementations for the music catalog.

Hey future me - repositories hand back ORM models directly. The scanner mutates
them in place (cover backfill) and relies on the session's unit of work, so there
is no entity <-> model conversion layer here.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from saboriman.domain.entities import UserRole
from saboriman.domain.exceptions import EntityNotFoundException
from saboriman.infrastructure.persistence.models import (
    AlbumModel,
    TrackModel,
    UserModel,
)


class UserRepository:
    """SQLAlchemy repository for catalog accounts."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID."""
        return await self.session.get(UserModel, user_id)

    async def add(self, user: UserModel) -> UserModel:
        """Add a user and flush so constraint violations surface immediately."""
        self.session.add(user)
        await self.session.flush()
        return user

    async def ensure_system_user(self, user_id: str) -> tuple[UserModel, bool]:
        """Get the reserved system account, creating it if missing.

        Returns:
            Tuple of (user, created)
        """
        existing = await self.get_by_id(user_id)
        if existing is not None:
            return existing, False

        user = UserModel(
            id=user_id,
            username=user_id.lower(),
            email=f"{user_id.lower()}@localhost",
            password_hash=None,  # System account can't log in
            role=UserRole.ADMIN.value,
            status=1,
        )
        await self.add(user)
        return user, True


class AlbumRepository:
    """SQLAlchemy repository for albums."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, album: AlbumModel) -> AlbumModel:
        """Add an album and flush so the unique key is checked right away."""
        self.session.add(album)
        await self.session.flush()
        return album

    async def get_by_id(self, album_id: str) -> AlbumModel | None:
        """Get an album by ID."""
        return await self.session.get(AlbumModel, album_id)

    async def get_by_name_and_artist(
        self, name: str, artist_name: str
    ) -> AlbumModel | None:
        """Get an album by its unique (name, artist_name) key (exact match)."""
        stmt = select(AlbumModel).where(
            AlbumModel.name == name,
            AlbumModel.artist_name == artist_name,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_cover(self, album_id: str, cover_path: str) -> None:
        """Set the cover path of an album."""
        album = await self.get_by_id(album_id)
        if album is None:
            raise EntityNotFoundException("Album", album_id)
        album.cover_path = cover_path

    async def count(self) -> int:
        """Count all albums."""
        result = await self.session.execute(select(func.count(AlbumModel.id)))
        return result.scalar_one()


class TrackRepository:
    """SQLAlchemy repository for tracks."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, track: TrackModel) -> TrackModel:
        """Add a track and flush so the unique file_path is checked right away."""
        self.session.add(track)
        await self.session.flush()
        return track

    async def get_by_file_path(self, file_path: str) -> TrackModel | None:
        """Get a track by its absolute file path."""
        stmt = select(TrackModel).where(TrackModel.file_path == file_path)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_file_paths(self) -> list[str]:
        """Pluck the file_path column of every track."""
        result = await self.session.execute(select(TrackModel.file_path))
        return list(result.scalars().all())

    async def list_by_album(self, album_id: str) -> list[TrackModel]:
        """Get all tracks of an album ordered by disc and track number."""
        stmt = (
            select(TrackModel)
            .where(TrackModel.album_id == album_id)
            .order_by(TrackModel.disc_number, TrackModel.track_number)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_file_path(self, file_path: str) -> int:
        """Delete the track stored under file_path.

        Returns:
            Number of deleted rows (0 or 1)
        """
        stmt = delete(TrackModel).where(TrackModel.file_path == file_path)
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    # Hey future me - this is the "majority vote" for genre inference. Ties are broken
    # alphabetically so the result doesn't depend on row order in the database.
    async def most_common_genre(self, album_id: str) -> str | None:
        """Get the most frequent non-empty genre among an album's tracks."""
        genre_count = func.count(TrackModel.id)
        stmt = (
            select(TrackModel.genre)
            .where(
                TrackModel.album_id == album_id,
                TrackModel.genre.is_not(None),
                TrackModel.genre != "",
            )
            .group_by(TrackModel.genre)
            .order_by(genre_count.desc(), TrackModel.genre.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count all tracks."""
        result = await self.session.execute(select(func.count(TrackModel.id)))
        return result.scalar_one()
