"""mutagen + ffprobe implementation of the audio prober port."""

import logging
import os

from saboriman.config import Settings
from saboriman.domain.entities import AudioFacts, TagFacts
from saboriman.domain.exceptions import ProbeError, TagReadError
from saboriman.infrastructure.audio.ffprobe import probe_stream
from saboriman.infrastructure.audio.tag_reader import read_tags

logger = logging.getLogger(__name__)


class AudioProber:
    """Extracts everything the scanner needs from one audio file.

    Implements IAudioProber. Blocking, meant to run in a worker thread.
    """

    def __init__(self, settings: Settings) -> None:
        self._timeout = settings.scanner.probe_timeout_seconds
        self._binary = settings.scanner.ffprobe_binary

    def probe(self, path: str) -> AudioFacts:
        """Probe stream facts, then tags.

        Raises:
            ProbeError: If the stream can't be probed or the file can't be stat'ed
        """
        # Stream first: no point reading tags of a file we're going to skip
        stream = probe_stream(path, timeout=self._timeout, binary=self._binary)

        try:
            file_size = os.stat(path).st_size
        except OSError as e:
            raise ProbeError(f"Cannot stat file: {e}", path=path) from e

        warnings: list[str] = []
        try:
            tags = read_tags(path)
        except TagReadError as e:
            logger.warning("Tag read failed for %s: %s", path, e.message)
            warnings.append(f"{path}: {e.message}")
            tags = TagFacts()

        return AudioFacts(tags=tags, stream=stream, file_size=file_size, warnings=warnings)
