"""Periodic pre-roll hint while no segment is open."""

from __future__ import annotations

from ..config.settings import DetectorConfig
from ..core.runtime import RuntimeState


class PreRollNotifier:
    """Counts every processed tick and fires once per pre-roll window."""

    def __init__(self, cfg: DetectorConfig, state: RuntimeState):
        self._cfg = cfg
        self._state = state

    def tick(self) -> int:
        """
        Advance the counter by one tick.

        Returns the number of ticks in the window that just completed if a hint
        is due, 0 otherwise. The window restarts whether or not the hint fires.
        """
        state = self._state
        state.pre_roll_tick_count += 1
        if state.pre_roll_tick_count * self._cfg.tick_interval_ms < self._cfg.pre_roll_window_ms:
            return 0

        items = state.pre_roll_tick_count
        state.pre_roll_tick_count = 0
        return 0 if state.segment_open else items
