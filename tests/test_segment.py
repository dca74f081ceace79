"""Tests for the speech segment state machine and verdict rules."""

import pytest

from speech_detector.config.settings import DetectorConfig
from speech_detector.core.errors import SegmentInvariantError
from speech_detector.detection.segment import (
    AbortReason,
    SpeechSegmentTracker,
    average_volume,
    decide_verdict,
)


class TestDecideVerdict:
    """Verdict is a pure function of duration and average volume."""

    @pytest.fixture
    def cfg(self):
        return DetectorConfig(min_segment_duration_ms=400, min_average_segment_volume=0.04)

    @pytest.mark.parametrize("duration, volume, expected", [
        (399.9, 0.0399, AbortReason.TOO_SHORT),   # both fail: duration checked first
        (399.9, 0.04, AbortReason.TOO_SHORT),
        (400.0, 0.0399, AbortReason.TOO_QUIET),
        (400.0, 0.04, None),
        (1000.0, 0.5, None),
        (-50.0, 0.5, AbortReason.TOO_SHORT),
    ])
    def test_boundary_grid(self, cfg, duration, volume, expected):
        verdict = decide_verdict(duration, volume, cfg)
        assert verdict.reason is expected
        assert verdict.accepted is (expected is None)
        assert verdict.active_duration_ms == duration
        assert verdict.average_volume == volume

    def test_deterministic(self, cfg):
        assert decide_verdict(420.0, 0.05, cfg) == decide_verdict(420.0, 0.05, cfg)


class TestAverageVolume:

    def test_mean_rounded_to_four_places(self):
        assert average_volume([0.05, 0.05, 0.05]) == 0.05
        assert average_volume([0.1, 0.2, 0.2]) == 0.1667

    def test_empty_samples_is_an_invariant_violation(self):
        with pytest.raises(SegmentInvariantError):
            average_volume([])


class TestSpeechSegmentTracker:

    @pytest.fixture
    def cfg(self):
        # 4 silence ticks close a segment
        return DetectorConfig(tick_interval_ms=50, max_inter_segment_silence_ms=200, min_segment_duration_ms=100)

    @pytest.fixture
    def tracker(self, cfg, runtime_state):
        return SpeechSegmentTracker(cfg, runtime_state)

    def test_first_signal_opens_segment(self, tracker, runtime_state):
        update = tracker.on_signal(0.05, now_s=10.0)
        assert update.opened is True
        assert update.segment_id == 1
        assert update.items == 1
        assert runtime_state.segment_open is True
        assert runtime_state.segment_start_s == 10.0
        assert runtime_state.segment_volume_samples == [0.05]

    def test_further_signals_accumulate(self, tracker, runtime_state):
        tracker.on_signal(0.05, now_s=10.0)
        update = tracker.on_signal(0.07, now_s=10.05)
        assert update.opened is False
        assert update.items == 2
        assert update.duration_ms == pytest.approx(50.0)
        assert runtime_state.segment_volume_samples == [0.05, 0.07]

    def test_counters_reset_on_opposite_level(self, tracker, runtime_state):
        tracker.on_signal(0.05, now_s=10.0)
        tracker.on_signal(0.05, now_s=10.05)
        update = tracker.on_silence(now_s=10.1)
        assert update.items == 1
        assert runtime_state.consecutive_signal_ticks == 0
        update = tracker.on_signal(0.05, now_s=10.15)
        assert update.items == 1
        assert runtime_state.consecutive_silence_ticks == 0

    def test_silence_while_closed_has_no_verdict(self, tracker):
        updates = [tracker.on_silence(now_s=10.0 + i * 0.05) for i in range(10)]
        assert all(u.verdict is None for u in updates)
        assert [u.items for u in updates] == list(range(1, 11))

    def test_verdict_after_max_silence_ticks(self, tracker, runtime_state):
        for i in range(6):
            tracker.on_signal(0.05, now_s=10.0 + i * 0.05)
        verdicts = []
        for i in range(4):
            update = tracker.on_silence(now_s=10.3 + i * 0.05)
            verdicts.append(update.verdict)
        assert verdicts[:3] == [None, None, None]
        verdict = verdicts[3]
        assert verdict is not None
        # 450ms elapsed minus 200ms of trailing silence
        assert verdict.active_duration_ms == pytest.approx(250.0)
        assert verdict.average_volume == 0.05
        assert verdict.accepted
        assert runtime_state.segment_open is False

    def test_long_silence_yields_single_verdict(self, tracker):
        tracker.on_signal(0.05, now_s=10.0)
        verdicts = [tracker.on_silence(now_s=10.05 + i * 0.05).verdict for i in range(20)]
        assert sum(v is not None for v in verdicts) == 1

    def test_new_segment_gets_new_id_and_fresh_samples(self, tracker, runtime_state):
        tracker.on_signal(0.9, now_s=10.0)
        for i in range(4):
            tracker.on_silence(now_s=10.05 + i * 0.05)
        update = tracker.on_signal(0.05, now_s=11.0)
        assert update.opened is True
        assert update.segment_id == 2
        assert runtime_state.segment_volume_samples == [0.05]

    def test_close_without_verdict(self, tracker, runtime_state):
        tracker.on_signal(0.05, now_s=10.0)
        assert tracker.close() == 1
        assert runtime_state.segment_open is False
        assert tracker.close() is None

    def test_elapsed_none_before_any_segment(self, tracker):
        assert tracker.elapsed_ms(10.0) is None
