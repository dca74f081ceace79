from dataclasses import dataclass
from enum import Enum
from typing import Optional


class VolumeLevel(Enum):
    MUTE = "mute"          # microphone effectively closed
    SIGNAL = "signal"      # loud enough to be speech
    SILENCE = "silence"    # mic open, background level


class DetectorEventType(str, Enum):
    """Named notifications emitted on the host event channel."""
    LEVEL = "level"                      # every processed tick
    MUTE = "mute"
    MIC_OPENED = "mic-opened"
    MIC_CLOSED = "mic-closed"
    SEGMENT_START = "segment-start"
    SIGNAL_TICK = "signal-tick"
    SILENCE_TICK = "silence-tick"
    SEGMENT_END = "segment-end"
    SEGMENT_ABORT = "segment-abort"
    PRE_ROLL_HINT = "pre-roll-hint"
    DETECTOR_START = "detector-start"
    DETECTOR_RESUME = "detector-resume"
    DETECTOR_STOP = "detector-stop"
    AUDIO_DATA = "audio-data"
    VOLUME_REJECTED = "volume-rejected"
    SINK_ERROR = "sink-error"


# Emitted once per tick; hosts usually log these at a lower level.
TICK_EVENTS = frozenset({
    DetectorEventType.LEVEL,
    DetectorEventType.MUTE,
    DetectorEventType.SIGNAL_TICK,
    DetectorEventType.SILENCE_TICK,
})


@dataclass(frozen=True)
class DetectorEvent:
    """One notification for the host: what happened and the measurements behind it."""
    type: DetectorEventType
    volume: Optional[float] = None
    timestamp_s: Optional[float] = None
    duration_ms: Optional[float] = None
    items: Optional[int] = None
    reason: Optional[str] = None
    average_volume: Optional[float] = None
    segment_id: Optional[int] = None
    data: Optional[bytes] = None


@dataclass(frozen=True)
class RecordedChunk:
    """Audio captured by the recording sink for one segment."""
    data: bytes
    segment_id: Optional[int] = None
    sample_rate: int = 16000
    started_at_s: Optional[float] = None
    ended_at_s: Optional[float] = None
