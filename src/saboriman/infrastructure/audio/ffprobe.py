"""Audio stream probing through the ffprobe binary."""

import json
import logging
import subprocess
from typing import Any

from saboriman.domain.entities import StreamFacts
from saboriman.domain.exceptions import ProbeError

logger = logging.getLogger(__name__)


def build_probe_command(path: str, binary: str = "ffprobe") -> list[str]:
    """Build the ffprobe argv for a JSON dump of format and streams."""
    return [
        binary,
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        path,
    ]


# Hey future me - ffprobe can hang forever on broken files (truncated FLAC, network
# mounts that went away). The timeout is the ONLY thing keeping one file from
# stalling the whole scan, never call this without it.
def probe_stream(path: str, timeout: float = 10.0, binary: str = "ffprobe") -> StreamFacts:
    """Run ffprobe on a file and parse the stream facts.

    Args:
        path: Absolute path of the audio file
        timeout: Seconds to wait for ffprobe before giving up
        binary: ffprobe executable name or path

    Returns:
        Parsed StreamFacts

    Raises:
        ProbeError: If ffprobe is missing, fails, times out or prints garbage
    """
    try:
        completed = subprocess.run(
            build_probe_command(path, binary),
            capture_output=True,
            check=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise ProbeError(f"ffprobe binary not found: {binary}", path=path) from e
    except subprocess.TimeoutExpired as e:
        raise ProbeError(f"ffprobe timed out after {timeout:g}s", path=path) from e
    except subprocess.CalledProcessError as e:
        raise ProbeError(f"ffprobe exited with code {e.returncode}", path=path) from e

    try:
        data = json.loads(completed.stdout or b"{}")
    except json.JSONDecodeError as e:
        raise ProbeError(f"Unparsable ffprobe output: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ProbeError("Unexpected ffprobe output", path=path)

    return parse_probe_output(data)


def parse_probe_output(data: dict[str, Any]) -> StreamFacts:
    """Turn ffprobe's JSON document into StreamFacts.

    Duration and bit rate come from the container ("format"), the rest from the
    first audio stream. Missing or malformed numbers become 0.
    """
    fmt = data.get("format") or {}
    audio_stream: dict[str, Any] = next(
        (
            stream
            for stream in data.get("streams") or []
            if stream.get("codec_type") == "audio"
        ),
        {},
    )

    bit_depth = _to_int(audio_stream.get("bits_per_raw_sample"))
    if not bit_depth:
        bit_depth = _to_int(audio_stream.get("bits_per_sample"))

    return StreamFacts(
        duration_seconds=_to_int(fmt.get("duration")),
        bit_rate_kbps=_to_int(fmt.get("bit_rate")) // 1000,
        sample_rate=_to_int(audio_stream.get("sample_rate")),
        bit_depth=bit_depth,
        channels=_to_int(audio_stream.get("channels")),
    )


def _to_int(value: Any) -> int:
    """Truncate ffprobe's stringly-typed numbers ("245.7" → 245)."""
    if value is None:
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0
