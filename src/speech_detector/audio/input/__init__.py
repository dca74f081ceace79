"""Audio input subsystem - captures audio, meters loudness, and records speech segments."""

from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import Optional

from ...config.settings import DetectorConfig
from ...core.events import RecordedChunk
from ...core.shutdown import GracefulShutdown
from ...detection.detector import EventCallback, SpeechCallback, SpeechDetector

from .types import AudioFormat, FrameConfig, MeterConfig
from .mic import Mic, AudioFrame
from .meter import VolumeMeter, frame_rms
from .recorder import FrameRecorder, encode_wav
from .volume_worker import VolumeTickWorker


@dataclass(frozen=True)
class AudioInputConfig:
    """Configuration for Audio input subsystem."""
    audio_format: AudioFormat = AudioFormat()
    frame: FrameConfig = FrameConfig()
    meter: MeterConfig = MeterConfig()
    input_device: Optional[int] = None


class AudioInput:
    """
    Audio input subsystem facade.

    Responsibilities:
    - Microphone capture (Mic thread), also the detector's audio pipeline
    - Loudness metering, speech detection and recording (VolumeTickWorker thread)

    Stopping goes through the shutdown signal so the detector is only touched
    from the worker thread.
    """

    def __init__(
        self,
        shutdown_signal: GracefulShutdown,
        detector_cfg: DetectorConfig,
        cfg: AudioInputConfig = AudioInputConfig(),
        on_event: Optional[EventCallback] = None,
        on_speech: Optional[SpeechCallback] = None,
    ):
        self._shutdown_signal = shutdown_signal
        self._cfg = cfg

        self._frames_queue: queue.Queue[AudioFrame] = queue.Queue(
            maxsize=cfg.frame.max_frames_queue
        )
        self._chunk_queue: queue.Queue[RecordedChunk] = queue.Queue()

        self._mic = Mic(
            stop_signal=shutdown_signal,
            audio_format=cfg.audio_format,
            frame_cfg=cfg.frame,
            frames_queue=self._frames_queue,
            device=cfg.input_device,
        )
        self._recorder = FrameRecorder(
            audio_format=cfg.audio_format,
            chunk_queue=self._chunk_queue,
        )
        self._detector = SpeechDetector(
            detector_cfg,
            sink=self._recorder,
            pipeline=self._mic,
            on_event=on_event,
            on_speech=on_speech,
        )
        self._worker = VolumeTickWorker(
            stop_signal=shutdown_signal,
            frames_queue=self._frames_queue,
            chunk_queue=self._chunk_queue,
            meter=VolumeMeter(cfg.meter, detector_cfg.tick_interval_ms),
            recorder=self._recorder,
            detector=self._detector,
        )

    @property
    def detector(self) -> SpeechDetector:
        return self._detector

    def start(self) -> None:
        """Start the detection session and both threads."""
        self._detector.start()
        self._mic.start()
        self._worker.start()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for both threads to finish."""
        self._mic.join(timeout)
        self._worker.join(timeout)


__all__ = [
    "AudioInput",
    "AudioInputConfig",
    "AudioFormat",
    "FrameConfig",
    "MeterConfig",
    "AudioFrame",
    "Mic",
    "VolumeMeter",
    "frame_rms",
    "FrameRecorder",
    "encode_wav",
    "VolumeTickWorker",
]
