"""Audio file inspection (tags via mutagen, streams via ffprobe)."""

from .ffprobe import parse_probe_output, probe_stream
from .prober import AudioProber
from .tag_reader import read_tags

__all__ = [
    "AudioProber",
    "parse_probe_output",
    "probe_stream",
    "read_tags",
]
