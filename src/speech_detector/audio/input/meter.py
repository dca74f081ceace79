"""Smoothed RMS loudness meter producing one reading per tick."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .types import MeterConfig

# Frame timestamps jitter; a reading this close to a full interval still counts.
TIMESTAMP_SLACK_S = 0.001


def frame_rms(pcm: np.ndarray) -> float:
    if pcm.size == 0:
        return 0.0
    samples = pcm.astype(np.float64)
    return float(np.sqrt(np.mean(samples * samples)))


class VolumeMeter:
    """
    Peak-hold RMS meter: a loud frame raises the reading immediately, quieter
    frames let it decay by `smoothing_factor` per frame.

    Frames can arrive faster than the tick interval; `update` returns a reading
    only when the next tick is due. Due times advance in whole intervals from
    the first reading, so 20ms frames with 50ms ticks still average one reading
    per 50ms of frame time. After a gap longer than one interval the schedule
    restarts from the late frame instead of bursting to catch up.
    """

    def __init__(self, cfg: MeterConfig, tick_interval_ms: int):
        self._cfg = cfg
        self._tick_interval_s = tick_interval_ms / 1000.0
        self._volume = 0.0
        self._next_reading_s: Optional[float] = None

    @property
    def volume(self) -> float:
        return self._volume

    def update(self, pcm: np.ndarray, timestamp_s: float) -> Optional[float]:
        self._volume = max(frame_rms(pcm), self._volume * self._cfg.smoothing_factor)

        if self._next_reading_s is None:
            self._next_reading_s = timestamp_s + self._tick_interval_s
            return self._volume

        if timestamp_s < self._next_reading_s - TIMESTAMP_SLACK_S:
            return None
        self._next_reading_s += self._tick_interval_s
        if timestamp_s >= self._next_reading_s - TIMESTAMP_SLACK_S:
            # more than one interval behind
            self._next_reading_s = timestamp_s + self._tick_interval_s
        return self._volume

    def reset(self) -> None:
        self._volume = 0.0
        self._next_reading_s = None
