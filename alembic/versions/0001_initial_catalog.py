"""initial catalog: users, album, music

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00.000000

Hey future me - the three tables the library scanner writes to:
- users: only the reserved SYSTEM account matters to the scanner
- album: unique (name, artist_name), no artist table
- music: one row per audio file, unique absolute file_path
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create users, album and music tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("email", sa.String(100), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(60), nullable=True),
        sa.Column("avatar", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("status", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "album",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("artist_name", sa.String(255), nullable=False),
        sa.Column("genre", sa.String(100), nullable=True),
        sa.Column("cover_path", sa.String(768), nullable=True),
        sa.Column("release_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("name", "artist_name", name="uq_album_name_artist"),
    )
    op.create_index("ix_album_name", "album", ["name"])
    op.create_index("ix_album_artist_name", "album", ["artist_name"])
    op.create_index("ix_album_genre", "album", ["genre"])

    op.create_table(
        "music",
        sa.Column("id", sa.String(8), primary_key=True),
        sa.Column("file_path", sa.String(768), nullable=False, unique=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("album_artist", sa.String(255), nullable=False),
        sa.Column("composer", sa.String(255), nullable=True),
        sa.Column("performer", sa.String(255), nullable=True),
        sa.Column("genre", sa.String(100), nullable=True),
        sa.Column("year", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("release_date", sa.String(50), nullable=True),
        sa.Column("track_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("disc_number", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("duration", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("size", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("suffix", sa.String(10), nullable=False, server_default=""),
        sa.Column("bit_rate", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sample_rate", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bit_depth", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("channels", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "has_cover_art", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("cover_path", sa.String(768), nullable=True),
        sa.Column("label", sa.String(255), nullable=True),
        sa.Column("copyright", sa.Text(), nullable=True),
        sa.Column("isrc", sa.String(50), nullable=True),
        sa.Column("upc", sa.String(50), nullable=True),
        sa.Column("play_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "album_id",
            sa.String(8),
            sa.ForeignKey("album.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_music_title", "music", ["title"])
    op.create_index("ix_music_artist", "music", ["artist"])
    op.create_index("ix_music_album_artist", "music", ["album_artist"])
    op.create_index("ix_music_album_id", "music", ["album_id"])
    op.create_index("ix_music_user_id", "music", ["user_id"])


def downgrade() -> None:
    """Drop the catalog tables."""
    op.drop_table("music")
    op.drop_table("album")
    op.drop_table("users")
