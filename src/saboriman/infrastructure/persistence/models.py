"""SQLAlchemy ORM models for Saboriman."""

import uuid
from datetime import UTC, date, datetime

import sqlalchemy as sa
from sqlalchemy import (
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# Hey future me, utc_now() ensures ALL timestamps are UTC! Never use naive datetime.now().
def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - catalog ids are SHORT opaque strings (8 upper-case hex chars),
# e.g. "3F2A9C1B". They show up in URLs and Subsonic clients, so keep them short.
# Only the SYSTEM account has a hand-picked id.
def generate_short_id() -> str:
    """Generate an 8 character upper-case hex id."""
    return uuid.uuid4().hex[:8].upper()


class Base(DeclarativeBase):
    """Base class for all ORM models.

    All models inherit from this to use the same metadata registry.
    """

    pass


class UserModel(Base):
    """Catalog account.

    Hey future me - the scanner only cares about ONE row here: the reserved
    SYSTEM account that owns every scanned track. Login, password hashing and
    roles are handled by the auth layer, not by the scanner.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_short_id
    )
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    password_hash: Mapped[str | None] = mapped_column(String(60), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 'admin', 'user', 'guest' (plain strings, not enum - SQLite compatibility)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")
    # 1 = active, 0 = disabled
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    tracks: Mapped[list["TrackModel"]] = relationship(
        "TrackModel", back_populates="user"
    )


# Listen up, AlbumModel is keyed by (name, artist_name) - NOT by artist id! There is no
# artist table: two files tagged Album="Demo", AlbumArtist="X" always land in the same
# album row. The unique constraint backs up the scanner's in-memory album cache.
class AlbumModel(Base):
    """SQLAlchemy model for albums discovered by the library scanner."""

    __tablename__ = "album"

    id: Mapped[str] = mapped_column(
        String(8), primary_key=True, default=generate_short_id
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    artist_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    genre: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    cover_path: Mapped[str | None] = mapped_column(String(768), nullable=True)
    # Year-only precision: a year tag of 1999 becomes 1999-01-01
    release_date: Mapped[date | None] = mapped_column(sa.Date(), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    tracks: Mapped[list["TrackModel"]] = relationship(
        "TrackModel", back_populates="album"
    )

    __table_args__ = (
        UniqueConstraint("name", "artist_name", name="uq_album_name_artist"),
    )


# Hey future me - TrackModel is ONE audio file. file_path is the absolute path and the
# natural key: the scanner snapshots all file_paths, imports paths it hasn't seen and
# deletes rows whose path vanished. String(768) keeps the unique index inside MySQL's
# utf8mb4 key length limit.
class TrackModel(Base):
    """SQLAlchemy model for a cataloged audio file."""

    __tablename__ = "music"

    id: Mapped[str] = mapped_column(
        String(8), primary_key=True, default=generate_short_id
    )
    file_path: Mapped[str] = mapped_column(String(768), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    artist: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    album_artist: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    composer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    performer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    genre: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Free text as found in the tag ("2003-05-12", "2003", ...)
    release_date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    track_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    disc_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Whole seconds, truncated
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    size: Mapped[int] = mapped_column(sa.BigInteger(), nullable=False, default=0)
    suffix: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    bit_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # kbps
    sample_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # Hz
    bit_depth: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    channels: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    has_cover_art: Mapped[bool] = mapped_column(
        sa.Boolean(), nullable=False, default=False
    )
    cover_path: Mapped[str | None] = mapped_column(String(768), nullable=True)
    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    copyright: Mapped[str | None] = mapped_column(Text, nullable=True)
    isrc: Mapped[str | None] = mapped_column(String(50), nullable=True)
    upc: Mapped[str | None] = mapped_column(String(50), nullable=True)
    play_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    album_id: Mapped[str | None] = mapped_column(
        String(8), ForeignKey("album.id", ondelete="SET NULL"), nullable=True
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )

    album: Mapped["AlbumModel | None"] = relationship(
        "AlbumModel", back_populates="tracks"
    )
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="tracks")

    __table_args__ = (
        Index("ix_music_album_id", "album_id"),
        Index("ix_music_user_id", "user_id"),
    )
