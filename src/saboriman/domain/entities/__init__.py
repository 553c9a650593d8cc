"""Domain entities for the library scanner."""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """Catalog account roles."""

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


@dataclass(frozen=True)
class EmbeddedPicture:
    """Cover art bytes embedded in an audio file."""

    data: bytes
    # Extension WITHOUT the dot ("jpg", "png"), empty when unknown
    ext: str = ""


@dataclass
class TagFacts:
    """Parsed tag metadata of one audio file.

    Hey future me - every field defaults to "empty" so a failed tag read can
    simply use TagFacts() and the import keeps going with filename fallbacks.
    """

    title: str = ""
    artist: str = ""
    album_artist: str = ""
    album: str = ""
    genre: str = ""
    composer: str = ""
    track_number: int = 0
    disc_number: int = 0
    year: int = 0
    picture: EmbeddedPicture | None = None
    # Lower-cased raw tag keys → first value (date, performer, label, isrc, ...)
    raw: dict[str, str] = field(default_factory=dict)

    def raw_value(self, *keys: str) -> str:
        """Return the first non-empty raw value among keys."""
        for key in keys:
            value = self.raw.get(key, "")
            if value:
                return value
        return ""

    @property
    def release_date(self) -> str:
        return self.raw_value("date")

    @property
    def performer(self) -> str:
        return self.raw_value("performer")

    @property
    def label(self) -> str:
        return self.raw_value("label", "organization")

    @property
    def copyright(self) -> str:
        return self.raw_value("copyright")

    @property
    def isrc(self) -> str:
        return self.raw_value("isrc")

    @property
    def upc(self) -> str:
        return self.raw_value("upc", "barcode")


@dataclass(frozen=True)
class StreamFacts:
    """Audio stream facts reported by the probe."""

    duration_seconds: int = 0
    bit_rate_kbps: int = 0
    sample_rate: int = 0
    bit_depth: int = 0
    channels: int = 0


@dataclass
class AudioFacts:
    """Everything the prober learned about one file."""

    tags: TagFacts
    stream: StreamFacts
    file_size: int = 0
    # Non-fatal problems hit while probing (e.g. unreadable tags)
    warnings: list[str] = field(default_factory=list)


class ScanState(str, Enum):
    """Lifecycle states of one scan pass."""

    INIT = "init"
    ENSURE_SYSTEM_ACCOUNT = "ensure_system_account"
    SNAPSHOT_EXISTING = "snapshot_existing"
    WALK = "walk"
    PRUNE = "prune"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ScanResult:
    """Outcome of one scan pass. Logged and kept in memory, never persisted."""

    library_root: str
    scanned_files: int = 0
    added: int = 0
    removed: int = 0
    errors: list[str] = field(default_factory=list)
    state: ScanState = ScanState.INIT
    error: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        data["started_at"] = self.started_at.isoformat()
        data["completed_at"] = (
            self.completed_at.isoformat() if self.completed_at else None
        )
        return data


__all__ = [
    "AudioFacts",
    "EmbeddedPicture",
    "ScanResult",
    "ScanState",
    "StreamFacts",
    "TagFacts",
    "UserRole",
]
