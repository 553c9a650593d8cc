"""Domain ports (interfaces) for dependency inversion."""

from saboriman.domain.ports.audio_prober import IAudioProber

__all__ = ["IAudioProber"]
