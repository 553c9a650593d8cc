"""Test doubles shared by unit and integration tests."""

import threading
from pathlib import Path

from saboriman.domain.entities import AudioFacts, StreamFacts, TagFacts


class FakeProber:
    """Returns canned facts per file name instead of running mutagen/ffprobe.

    Entries map a file NAME (not path) to TagFacts, AudioFacts or an exception
    instance to raise. Unknown names get empty tags and a 200s stream.
    """

    def __init__(
        self,
        entries: dict[str, TagFacts | AudioFacts | BaseException] | None = None,
        gate: threading.Event | None = None,
    ) -> None:
        self.entries = entries or {}
        self.gate = gate
        self.calls: list[str] = []

    def probe(self, path: str) -> AudioFacts:
        if self.gate is not None:
            self.gate.wait(timeout=10)
        self.calls.append(path)
        entry = self.entries.get(Path(path).name)
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, AudioFacts):
            return entry
        return AudioFacts(
            tags=entry or TagFacts(),
            stream=StreamFacts(
                duration_seconds=200,
                bit_rate_kbps=320,
                sample_rate=44100,
                bit_depth=16,
                channels=2,
            ),
            file_size=1024,
        )


def touch(path: Path, data: bytes = b"\x00") -> Path:
    """Create a file (and its parent directories)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
