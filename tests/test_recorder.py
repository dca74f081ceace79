"""Tests for the frame recorder sink."""

import io
import queue
import wave

import pytest
import numpy as np

from speech_detector.audio.input.mic import AudioFrame
from speech_detector.audio.input.recorder import FrameRecorder, encode_wav
from speech_detector.audio.input.types import AudioFormat
from speech_detector.core.errors import RecorderStateError


def make_frame(value, timestamp_s, n_samples=320):
    return AudioFrame(pcm=np.full(n_samples, value, dtype=np.float32), sample_rate=16000, timestamp_s=timestamp_s)


def read_wav(data):
    with wave.open(io.BytesIO(data), "rb") as wav:
        frames = wav.readframes(wav.getnframes())
        return wav.getframerate(), wav.getnchannels(), np.frombuffer(frames, dtype="<i2")


class TestEncodeWav:

    def test_encodes_mono_16bit(self):
        rate, channels, samples = read_wav(encode_wav(np.array([0.0, 0.5, -0.5, 2.0], dtype=np.float32), 16000))
        assert rate == 16000
        assert channels == 1
        assert samples.tolist() == [0, 16383, -16383, 32767]


class TestFrameRecorder:

    @pytest.fixture
    def chunk_queue(self):
        return queue.Queue()

    @pytest.fixture
    def recorder(self, chunk_queue):
        return FrameRecorder(audio_format=AudioFormat(), chunk_queue=chunk_queue)

    def test_frames_ignored_while_idle(self, recorder, chunk_queue):
        recorder.feed(make_frame(0.1, 1.0))
        recorder.start(1)
        recorder.stop(1)
        _, _, samples = read_wav(chunk_queue.get_nowait().data)
        assert len(samples) == 0

    def test_records_between_start_and_stop(self, recorder, chunk_queue):
        recorder.start(4)
        assert recorder.recording
        recorder.feed(make_frame(0.1, 1.0))
        recorder.feed(make_frame(0.2, 1.02))
        assert chunk_queue.empty()

        recorder.stop(4)
        assert not recorder.recording
        chunk = chunk_queue.get_nowait()
        assert chunk.segment_id == 4
        assert chunk.started_at_s == 1.0
        assert chunk.ended_at_s == 1.02
        rate, _, samples = read_wav(chunk.data)
        assert rate == 16000
        assert len(samples) == 640

    def test_start_while_recording_raises(self, recorder):
        recorder.start(1)
        with pytest.raises(RecorderStateError):
            recorder.start(2)

    def test_stop_while_idle_is_a_no_op(self, recorder, chunk_queue):
        recorder.stop(1)
        assert chunk_queue.empty()

    def test_next_recording_starts_empty(self, recorder, chunk_queue):
        recorder.start(1)
        recorder.feed(make_frame(0.1, 1.0))
        recorder.stop(1)
        recorder.start(2)
        recorder.feed(make_frame(0.1, 2.0))
        recorder.stop(2)
        chunk_queue.get_nowait()
        _, _, samples = read_wav(chunk_queue.get_nowait().data)
        assert len(samples) == 320
