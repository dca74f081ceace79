"""Microphone audio capture."""

from __future__ import annotations

import threading
import queue
import time
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import sounddevice as sd

from ...core.shutdown import StopSignal

from .types import AudioFormat, FrameConfig

logger = logging.getLogger(__name__)


@dataclass
class AudioFrame:
    """Single audio frame from microphone."""
    pcm: np.ndarray          # shape: (n_samples,) float32
    sample_rate: int
    timestamp_s: float


class Mic(threading.Thread):
    """
    Continuously captures microphone audio and pushes AudioFrame into frames_queue.

    Also serves as the detector's audio pipeline: while suspended, captured
    audio is discarded instead of queued.
    """

    def __init__(
        self,
        stop_signal: StopSignal,
        audio_format: AudioFormat,
        frame_cfg: FrameConfig,
        frames_queue: queue.Queue[AudioFrame],
        device: Optional[int] = None,
    ):
        if audio_format.channels < 1:
            raise ValueError(f"Microphone needs at least one input channel, got {audio_format.channels}")
        super().__init__(name="MicThread", daemon=True)
        self._stop_signal = stop_signal
        self._audio_format = audio_format
        self._frame_cfg = frame_cfg
        self._frames_queue = frames_queue
        self._device = device
        self._active = threading.Event()
        self._active.set()

    @property
    def suspended(self) -> bool:
        return not self._active.is_set()

    def suspend(self) -> None:
        if self._active.is_set():
            self._active.clear()
            logger.info("Microphone delivery suspended")

    def resume(self) -> None:
        if not self._active.is_set():
            self._active.set()
            logger.info("Microphone delivery resumed")

    def run(self) -> None:
        """Start microphone capture loop."""
        blocksize = int(self._audio_format.sample_rate * self._frame_cfg.frame_ms / 1000)

        dtype_map = {
            "float32": np.float32,
            "int16": np.int16,
            "int32": np.int32,
        }
        dtype = dtype_map.get(self._audio_format.dtype, np.float32)

        def audio_callback(indata, frames, time_info, status):
            """Callback function for sounddevice audio stream."""
            if status:
                logger.warning(f"Audio callback status: {status}")

            if not self._active.is_set():
                return

            # indata shape is (frames, channels); keep the first channel
            pcm = indata[:, 0].astype(np.float32)
            if dtype is np.int16:
                pcm /= 32768.0
            elif dtype is np.int32:
                pcm /= 2147483648.0

            frame = AudioFrame(
                pcm=pcm,
                sample_rate=self._audio_format.sample_rate,
                timestamp_s=time.time()
            )

            try:
                self._frames_queue.put_nowait(frame)
            except queue.Full:
                logger.warning("Frames queue is full, dropping audio frame")

        try:
            with sd.InputStream(
                callback=audio_callback,
                samplerate=self._audio_format.sample_rate,
                channels=self._audio_format.channels,
                blocksize=blocksize,
                dtype=dtype,
                device=self._device,
            ):
                while not self._stop_signal.is_set():
                    time.sleep(0.1)
        except Exception as e:
            logger.error(f"Error in microphone capture: {e}", exc_info=True)
        finally:
            logger.info("Microphone capture stopped")
