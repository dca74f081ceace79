"""Volume-threshold speech detector session."""

from __future__ import annotations

import logging
import math
import numbers
import time
from typing import Callable, Optional

from ..config.settings import DetectorConfig
from ..core.errors import InvalidVolumeError
from ..core.events import DetectorEvent, DetectorEventType, RecordedChunk
from ..core.runtime import RuntimeState
from ..core.events import VolumeLevel
from .classifier import classify_volume
from .dispatcher import AudioPipeline, CommandDispatcher, RecordingSink
from .preroll import PreRollNotifier
from .segment import SegmentUpdate, SpeechSegmentTracker
from .transitions import MicTransition, TransitionTracker

logger = logging.getLogger(__name__)

EventCallback = Callable[[DetectorEvent], None]
SpeechCallback = Callable[[RecordedChunk], None]


def validate_volume(value: object) -> float:
    """Return the sample as a float, or raise InvalidVolumeError if it is unusable."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidVolumeError(f"volume must be a real number, got {type(value).__name__}")
    volume = float(value)
    if not math.isfinite(volume):
        raise InvalidVolumeError(f"volume must be finite, got {volume}")
    if volume < 0:
        raise InvalidVolumeError(f"volume must be non-negative, got {volume}")
    return volume


class SpeechDetector:
    """
    Classifies a stream of smoothed loudness samples into speech segments and
    drives a recording sink.

    One sample is processed per tick via `process_volume`. Every decision is
    reported to `on_event`; chunks recorded for valid segments are handed to
    `on_speech`. All state lives in a single RuntimeState owned by this object,
    so ticks, chunks and session controls must come from one thread.
    """

    def __init__(
        self,
        cfg: DetectorConfig,
        sink: Optional[RecordingSink] = None,
        pipeline: Optional[AudioPipeline] = None,
        on_event: Optional[EventCallback] = None,
        on_speech: Optional[SpeechCallback] = None,
        clock: Callable[[], float] = time.time,
    ):
        self._cfg = cfg
        self._on_event = on_event
        self._on_speech = on_speech
        self._clock = clock

        self._state = RuntimeState.create(recording_enabled=cfg.recording_enabled)
        self._transitions = TransitionTracker(self._state)
        self._segments = SpeechSegmentTracker(cfg, self._state)
        self._pre_roll = PreRollNotifier(cfg, self._state)
        self._dispatcher = CommandDispatcher(
            self._state,
            sink=sink,
            pipeline=pipeline,
            on_fault=self._report_fault,
        )

    @property
    def config(self) -> DetectorConfig:
        return self._cfg

    @property
    def state(self) -> RuntimeState:
        return self._state

    @property
    def recording_enabled(self) -> bool:
        return self._state.recording_enabled

    def set_recording_enabled(self, enabled: bool) -> None:
        """Host override; takes effect on the next tick."""
        self._state.recording_enabled = bool(enabled)

    # Ticks

    def process_volume(self, volume: object) -> bool:
        """Process one loudness sample. Returns False if the tick was ignored or rejected."""
        if not self._state.recording_enabled:
            return False

        now_s = self._clock()
        try:
            volume = validate_volume(volume)
        except InvalidVolumeError as e:
            logger.warning(f"Rejected volume sample: {e}")
            self._emit(DetectorEvent(DetectorEventType.VOLUME_REJECTED, timestamp_s=now_s, reason=str(e)))
            return False

        self._state.current_volume = volume

        pre_roll_items = self._pre_roll.tick()
        if pre_roll_items:
            self._emit(DetectorEvent(
                DetectorEventType.PRE_ROLL_HINT,
                volume=volume,
                timestamp_s=now_s,
                items=pre_roll_items,
            ))

        level = classify_volume(volume, self._cfg)
        self._emit(DetectorEvent(
            DetectorEventType.LEVEL,
            volume=volume,
            timestamp_s=now_s,
            duration_ms=self._segments.elapsed_ms(now_s),
        ))

        transition = self._transitions.observe(level)
        if level is VolumeLevel.MUTE:
            self._emit(DetectorEvent(DetectorEventType.MUTE, volume=volume, timestamp_s=now_s))
            if transition is MicTransition.CLOSED:
                self._emit(DetectorEvent(DetectorEventType.MIC_CLOSED, volume=volume, timestamp_s=now_s))
            return True

        if transition is MicTransition.OPENED:
            self._emit(DetectorEvent(DetectorEventType.MIC_OPENED, volume=volume, timestamp_s=now_s))

        if level is VolumeLevel.SIGNAL:
            self._handle_signal(volume, now_s)
        else:
            self._handle_silence(volume, now_s)
        return True

    def _handle_signal(self, volume: float, now_s: float) -> None:
        update = self._segments.on_signal(volume, now_s)
        if update.opened:
            self._emit(DetectorEvent(
                DetectorEventType.SEGMENT_START,
                volume=volume,
                timestamp_s=now_s,
                duration_ms=update.duration_ms,
                items=update.items,
                segment_id=update.segment_id,
            ))
        self._emit(DetectorEvent(
            DetectorEventType.SIGNAL_TICK,
            volume=volume,
            timestamp_s=now_s,
            duration_ms=update.duration_ms,
            items=update.items,
        ))

    def _handle_silence(self, volume: float, now_s: float) -> None:
        update = self._segments.on_silence(now_s)
        self._emit(DetectorEvent(
            DetectorEventType.SILENCE_TICK,
            volume=volume,
            timestamp_s=now_s,
            duration_ms=update.duration_ms,
            items=update.items,
        ))
        if update.verdict is not None:
            self._emit(self._verdict_event(update, volume, now_s))

    @staticmethod
    def _verdict_event(update: SegmentUpdate, volume: float, now_s: float) -> DetectorEvent:
        verdict = update.verdict
        if verdict.accepted:
            event_type = DetectorEventType.SEGMENT_END
            reason = None
        else:
            event_type = DetectorEventType.SEGMENT_ABORT
            reason = verdict.reason.value
        return DetectorEvent(
            event_type,
            volume=volume,
            timestamp_s=now_s,
            duration_ms=verdict.active_duration_ms,
            items=update.items,
            reason=reason,
            average_volume=verdict.average_volume,
            segment_id=update.segment_id,
        )

    # Recorded audio

    def handle_chunk(self, chunk: RecordedChunk) -> bool:
        """Deliver a chunk from the recording sink. Returns True if it was forwarded to the host."""
        if not self._dispatcher.accept_chunk(chunk):
            return False

        if self._on_speech:
            try:
                self._on_speech(chunk)
            except Exception as e:
                logger.warning(f"Speech callback failed: {e}", exc_info=True)

        duration_ms = None
        if chunk.started_at_s is not None and chunk.ended_at_s is not None:
            duration_ms = (chunk.ended_at_s - chunk.started_at_s) * 1000.0
        self._emit(DetectorEvent(
            DetectorEventType.AUDIO_DATA,
            timestamp_s=chunk.ended_at_s,
            duration_ms=duration_ms,
            segment_id=chunk.segment_id,
            data=chunk.data,
        ))
        return True

    # Session controls

    def start(self) -> None:
        self._enable(DetectorEventType.DETECTOR_START)

    def resume(self) -> None:
        self._enable(DetectorEventType.DETECTOR_RESUME)

    def _enable(self, event_type: DetectorEventType) -> None:
        state = self._state
        if state.running and state.recording_enabled:
            logger.debug("Detector already running, ignoring %s", event_type.value)
            return
        state.running = True
        state.recording_enabled = True
        self._dispatcher.resume_pipeline()
        logger.info("Speech detector %s", "resumed" if event_type is DetectorEventType.DETECTOR_RESUME else "started")
        self._emit(DetectorEvent(event_type, timestamp_s=self._clock()))

    def stop(self) -> None:
        """
        Stop processing ticks. A segment still open is closed without a verdict:
        the sink is stopped right away and whatever it recorded is discarded.
        """
        state = self._state
        if not state.running and not state.recording_enabled:
            logger.debug("Detector already stopped")
            return
        state.running = False
        state.recording_enabled = False
        self._dispatcher.suspend_pipeline()

        segment_id = self._segments.close()
        if segment_id is not None:
            self._dispatcher.discard_segment(segment_id)
            self._dispatcher.stop_recording(segment_id)

        logger.info("Speech detector stopped")
        self._emit(DetectorEvent(DetectorEventType.DETECTOR_STOP, timestamp_s=self._clock()))

    # Event channel

    def _emit(self, event: DetectorEvent) -> None:
        self._dispatcher.dispatch(event)
        if self._on_event:
            try:
                self._on_event(event)
            except Exception as e:
                logger.warning(f"Event callback failed for {event.type.value}: {e}", exc_info=True)

    def _report_fault(self, command: str, error: Exception) -> None:
        self._emit(DetectorEvent(
            DetectorEventType.SINK_ERROR,
            volume=self._state.current_volume,
            timestamp_s=self._clock(),
            reason=f"{command}: {error}",
        ))
