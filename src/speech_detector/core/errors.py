"""Exceptions raised by the speech detector and its collaborators."""


class SpeechDetectorError(Exception):
    """Base class for speech detector errors."""


class InvalidVolumeError(SpeechDetectorError):
    """Raised when the signal source delivers a malformed volume sample."""


class RecorderStateError(SpeechDetectorError):
    """Raised when the recording sink receives a command in the wrong state."""


class SegmentInvariantError(SpeechDetectorError):
    """Raised when segment bookkeeping reaches a state that should be unreachable."""
