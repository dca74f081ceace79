"""Edge-triggered microphone open/close tracking."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from ..core.runtime import RuntimeState
from ..core.events import VolumeLevel


class MicTransition(Enum):
    OPENED = "opened"
    CLOSED = "closed"


class TransitionTracker:
    """
    Remembers the last classified level and reports a transition only when a
    tick crosses between mute and non-mute.
    """

    def __init__(self, state: RuntimeState):
        self._state = state

    def observe(self, level: VolumeLevel) -> Optional[MicTransition]:
        previous = self._state.level
        self._state.level = level

        if level is VolumeLevel.MUTE:
            return MicTransition.CLOSED if previous is not VolumeLevel.MUTE else None
        if previous is VolumeLevel.MUTE:
            return MicTransition.OPENED
        return None
