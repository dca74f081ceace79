"""Audio subsystem."""

from .input import AudioInput, AudioInputConfig

__all__ = ["AudioInput", "AudioInputConfig"]
