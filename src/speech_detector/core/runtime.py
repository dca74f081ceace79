"""Per-session mutable detector state."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from .events import VolumeLevel

# Aborted segment ids remembered until their chunk arrives.
MAX_PENDING_ABORTS = 16


@dataclass
class RuntimeState:
    """
    All mutable state of one detector session.

    Owned by a single SpeechDetector and mutated only from its tick handler and
    session controls; collaborators never touch it.
    """

    recording_enabled: bool = True
    running: bool = False
    current_volume: float = 0.0
    level: VolumeLevel = VolumeLevel.MUTE

    segment_open: bool = False
    segment_id: int = 0
    segment_start_s: Optional[float] = None
    segment_volume_samples: list[float] = field(default_factory=list)
    consecutive_silence_ticks: int = 0
    consecutive_signal_ticks: int = 0

    pre_roll_tick_count: int = 0

    suppress_next_chunk: bool = False
    aborted_segment_ids: "deque[int]" = field(
        default_factory=lambda: deque(maxlen=MAX_PENDING_ABORTS)
    )

    @classmethod
    def create(cls, recording_enabled: bool = True) -> "RuntimeState":
        return cls(recording_enabled=recording_enabled)
