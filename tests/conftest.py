import pytest
import os
from unittest.mock import Mock

from speech_detector.config.settings import DetectorConfig
from speech_detector.core.runtime import RuntimeState
from speech_detector.detection.detector import SpeechDetector


class FakeClock:
    """Manually advanced wall clock, in seconds."""

    def __init__(self, start_s: float = 1000.0):
        self.now_s = start_s

    def __call__(self) -> float:
        return self.now_s

    def advance_ms(self, ms: float) -> None:
        self.now_s += ms / 1000.0


@pytest.fixture
def setup_test_env():
    """Setup test environment variables"""
    original_env = os.environ.copy()

    os.environ["DETECTOR_TICK_INTERVAL_MS"] = "20"
    os.environ["DETECTOR_MIN_SEGMENT_DURATION_MS"] = "250"

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def detector_config():
    """50ms ticks, 600ms trailing silence (12 ticks), default thresholds."""
    return DetectorConfig()


@pytest.fixture
def runtime_state():
    return RuntimeState.create()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return Mock(spec=["start", "stop"])


@pytest.fixture
def pipeline():
    return Mock(spec=["resume", "suspend"])


@pytest.fixture
def events():
    return []


@pytest.fixture
def detector(detector_config, sink, pipeline, events, clock):
    return SpeechDetector(
        detector_config,
        sink=sink,
        pipeline=pipeline,
        on_event=events.append,
        clock=clock,
    )
