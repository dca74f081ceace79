"""Recording sink that buffers microphone frames between start and stop."""

from __future__ import annotations

import io
import logging
import queue
import wave
from typing import Optional

import numpy as np

from ...core.errors import RecorderStateError
from ...core.events import RecordedChunk
from .mic import AudioFrame
from .types import AudioFormat

logger = logging.getLogger(__name__)


def encode_wav(pcm: np.ndarray, sample_rate: int) -> bytes:
    """Encode float32 mono PCM in [-1, 1] as a 16-bit WAV file."""
    pcm16 = (np.clip(pcm, -1.0, 1.0) * 32767.0).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm16.tobytes())
    return buf.getvalue()


class FrameRecorder:
    """
    Buffers frames fed while recording and, on stop, queues one WAV chunk
    tagged with the segment id it was started for.

    Chunks are delivered through `chunk_queue`, never returned from `stop`.
    """

    def __init__(
        self,
        audio_format: AudioFormat,
        chunk_queue: queue.Queue[RecordedChunk],
    ):
        self._audio_format = audio_format
        self._chunk_queue = chunk_queue
        self._segment_id: Optional[int] = None
        self._parts: list[np.ndarray] = []
        self._started_at_s: Optional[float] = None
        self._last_frame_at_s: Optional[float] = None

    @property
    def recording(self) -> bool:
        return self._segment_id is not None

    def start(self, segment_id: int) -> None:
        if self._segment_id is not None:
            raise RecorderStateError(
                f"recorder already recording segment {self._segment_id}, cannot start {segment_id}"
            )
        self._segment_id = segment_id
        self._parts = []
        self._started_at_s = None
        self._last_frame_at_s = None
        logger.info("Recording started for segment %d", segment_id)

    def feed(self, frame: AudioFrame) -> None:
        if self._segment_id is None:
            return
        if self._started_at_s is None:
            self._started_at_s = frame.timestamp_s
        self._last_frame_at_s = frame.timestamp_s
        self._parts.append(frame.pcm)

    def stop(self, segment_id: int) -> None:
        if self._segment_id is None:
            logger.debug("Recorder stop for segment %s ignored, not recording", segment_id)
            return
        if segment_id != self._segment_id:
            logger.warning("Stop for segment %s while recording segment %s", segment_id, self._segment_id)

        pcm = np.concatenate(self._parts) if self._parts else np.array([], dtype=np.float32)
        chunk = RecordedChunk(
            data=encode_wav(pcm, self._audio_format.sample_rate),
            segment_id=self._segment_id,
            sample_rate=self._audio_format.sample_rate,
            started_at_s=self._started_at_s,
            ended_at_s=self._last_frame_at_s,
        )
        logger.info("Recording stopped for segment %d (%d samples)", self._segment_id, len(pcm))

        self._segment_id = None
        self._parts = []
        self._chunk_queue.put(chunk)
