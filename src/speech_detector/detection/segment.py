"""Speech segment state machine and verdict rules."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..config.settings import DetectorConfig
from ..core.errors import SegmentInvariantError
from ..core.runtime import RuntimeState

logger = logging.getLogger(__name__)


class AbortReason(str, Enum):
    TOO_SHORT = "too short"
    TOO_QUIET = "too quiet"


@dataclass(frozen=True)
class Verdict:
    """Outcome of a closed segment."""
    active_duration_ms: float
    average_volume: float
    reason: Optional[AbortReason] = None  # None for a valid segment

    @property
    def accepted(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class SegmentUpdate:
    """What one signal or silence tick did to the segment."""
    items: int
    segment_id: Optional[int] = None
    opened: bool = False
    verdict: Optional[Verdict] = None
    duration_ms: Optional[float] = None


def decide_verdict(active_duration_ms: float, average_volume: float, cfg: DetectorConfig) -> Verdict:
    """
    Classify a finished segment. Rules are checked in order and the first match wins:
    too short, then too quiet, otherwise valid.
    """
    if active_duration_ms < cfg.min_segment_duration_ms:
        reason = AbortReason.TOO_SHORT
    elif average_volume < cfg.min_average_segment_volume:
        reason = AbortReason.TOO_QUIET
    else:
        reason = None
    return Verdict(
        active_duration_ms=active_duration_ms,
        average_volume=average_volume,
        reason=reason,
    )


def average_volume(samples: list[float]) -> float:
    if not samples:
        raise SegmentInvariantError("segment closed without any signal samples")
    return round(float(np.mean(samples)), 4)


class SpeechSegmentTracker:
    """
    Opens a segment on the first signal tick and closes it once silence has
    lasted `max_silence_ticks` ticks in a row.

    The tracker only returns decisions; turning them into sink commands and
    host notifications is the caller's job.
    """

    def __init__(self, cfg: DetectorConfig, state: RuntimeState):
        self._cfg = cfg
        self._state = state

    def elapsed_ms(self, now_s: float) -> Optional[float]:
        if self._state.segment_start_s is None:
            return None
        return (now_s - self._state.segment_start_s) * 1000.0

    def on_signal(self, volume: float, now_s: float) -> SegmentUpdate:
        state = self._state
        state.consecutive_silence_ticks = 0
        state.consecutive_signal_ticks += 1

        opened = False
        if not state.segment_open:
            state.segment_open = True
            state.segment_id += 1
            state.segment_start_s = now_s
            state.segment_volume_samples = []
            opened = True
            logger.info("Segment %d started at %.3f", state.segment_id, now_s)

        state.segment_volume_samples.append(volume)
        return SegmentUpdate(
            items=state.consecutive_signal_ticks,
            segment_id=state.segment_id,
            opened=opened,
            duration_ms=self.elapsed_ms(now_s),
        )

    def on_silence(self, now_s: float) -> SegmentUpdate:
        state = self._state
        state.consecutive_signal_ticks = 0
        state.consecutive_silence_ticks += 1

        elapsed = self.elapsed_ms(now_s)
        # equality, so a long silence run yields a single verdict
        if not state.segment_open or state.consecutive_silence_ticks != self._cfg.max_silence_ticks:
            return SegmentUpdate(items=state.consecutive_silence_ticks, duration_ms=elapsed)

        verdict = decide_verdict(
            active_duration_ms=elapsed - self._cfg.max_inter_segment_silence_ms,
            average_volume=average_volume(state.segment_volume_samples),
            cfg=self._cfg,
        )
        state.segment_open = False
        logger.info(
            "Segment %d closed: %s (active %.0fms, average volume %.4f)",
            state.segment_id,
            "valid" if verdict.accepted else verdict.reason.value,
            verdict.active_duration_ms,
            verdict.average_volume,
        )
        return SegmentUpdate(
            items=state.consecutive_silence_ticks,
            segment_id=state.segment_id,
            verdict=verdict,
            duration_ms=elapsed,
        )

    def close(self) -> Optional[int]:
        """Close an open segment without a verdict; returns its id, or None if none was open."""
        state = self._state
        if not state.segment_open:
            return None
        state.segment_open = False
        state.consecutive_signal_ticks = 0
        state.consecutive_silence_ticks = 0
        logger.info("Segment %d closed without verdict", state.segment_id)
        return state.segment_id
