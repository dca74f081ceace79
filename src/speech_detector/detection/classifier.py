"""Map one loudness sample to a volume level."""

from __future__ import annotations

from ..config.settings import DetectorConfig
from ..core.events import VolumeLevel


def classify_volume(volume: float, cfg: DetectorConfig) -> VolumeLevel:
    if volume < cfg.mute_max_volume:
        return VolumeLevel.MUTE
    if volume > cfg.speech_min_volume:
        return VolumeLevel.SIGNAL
    return VolumeLevel.SILENCE
