"""Audio Prober Port (Interface).

Future me note:
The scanner only needs ONE call per new file: "tell me everything about this
path". The real implementation (mutagen + ffprobe) lives in
infrastructure/audio/prober.py. Tests plug in a fake that returns canned facts,
so they don't need ffprobe or real encoded audio.

Contract:
- Blocking call, the scanner runs it in a worker thread.
- Tag problems are NOT raised, they come back in AudioFacts.warnings.
- Stream probe problems ARE raised as ProbeError (file gets skipped).
"""

from __future__ import annotations

from typing import Protocol

from saboriman.domain.entities import AudioFacts


class IAudioProber(Protocol):
    """Extracts tag and stream facts from one audio file."""

    def probe(self, path: str) -> AudioFacts:
        """Probe a file.

        Raises:
            ProbeError: If the audio stream could not be analysed
        """
        ...
