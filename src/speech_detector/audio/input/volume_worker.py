"""Worker thread that turns microphone frames into detector ticks."""

from __future__ import annotations

import queue
import logging

from ...core.events import RecordedChunk
from ...core.shutdown import StopSignal
from ...core.worker import QueueWorker
from ...detection.detector import SpeechDetector

from .meter import VolumeMeter
from .mic import AudioFrame
from .recorder import FrameRecorder

logger = logging.getLogger(__name__)


class VolumeTickWorker(QueueWorker[AudioFrame]):
    """
    Consumes AudioFrame items: meters them, feeds readings to the detector and
    frames to the recorder, and hands finished recordings back to the detector.

    The detector is only ever touched from this thread.
    """

    def __init__(
            self,
            stop_signal: StopSignal,
            frames_queue: queue.Queue[AudioFrame],
            chunk_queue: queue.Queue[RecordedChunk],
            meter: VolumeMeter,
            recorder: FrameRecorder,
            detector: SpeechDetector,
    ):
        super().__init__(
            name="VolumeTickThread",
            stop_signal=stop_signal,
            input_queue=frames_queue,
            poll_interval_s=0.1,
        )
        self._chunk_queue = chunk_queue
        self._meter = meter
        self._recorder = recorder
        self._detector = detector

    def handle(self, item: AudioFrame) -> None:
        """Handle one AudioFrame; may produce one tick."""
        self.deliver_chunks()

        reading = self._meter.update(item.pcm, item.timestamp_s)
        if reading is not None:
            self._detector.process_volume(reading)

        # after the tick, so the frame that opened a segment is recorded
        self._recorder.feed(item)

    def idle(self) -> None:
        self.deliver_chunks()

    def deliver_chunks(self) -> int:
        delivered = 0
        while True:
            try:
                chunk = self._chunk_queue.get_nowait()
            except queue.Empty:
                return delivered
            self._detector.handle_chunk(chunk)
            delivered += 1

    def cleanup(self) -> None:
        """Cleanup on shutdown - stop the session and flush the last recording."""
        self._detector.stop()
        self.deliver_chunks()
        logger.info("Volume tick worker stopped")
