"""Volume-threshold voice activity detection driving a recording sink."""

from .config.settings import DetectorConfig, load_config
from .core.errors import (
    InvalidVolumeError,
    RecorderStateError,
    SegmentInvariantError,
    SpeechDetectorError,
)
from .core.events import DetectorEvent, DetectorEventType, RecordedChunk, VolumeLevel
from .core.runtime import RuntimeState
from .detection.classifier import classify_volume
from .detection.detector import SpeechDetector
from .detection.segment import AbortReason, Verdict, decide_verdict

__version__ = "0.1.0"
__all__ = [
    "DetectorConfig",
    "load_config",
    "SpeechDetectorError",
    "InvalidVolumeError",
    "RecorderStateError",
    "SegmentInvariantError",
    "DetectorEvent",
    "DetectorEventType",
    "RecordedChunk",
    "RuntimeState",
    "VolumeLevel",
    "classify_volume",
    "SpeechDetector",
    "AbortReason",
    "Verdict",
    "decide_verdict",
]
