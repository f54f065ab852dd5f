from __future__ import annotations

import numpy as np
import pytest

from interview_stream.audio import AudioReceiver, SilenceTracker, audio_level, pcm_bytes_to_float32

FRAME_SAMPLES = 320  # 20ms @ 16kHz


def _frame(amplitude: int) -> bytes:
    return np.full(FRAME_SAMPLES, amplitude, dtype=np.int16).tobytes()


def test_pcm_conversion_and_level() -> None:
    samples = pcm_bytes_to_float32(np.array([16384, -16384], dtype=np.int16).tobytes())
    assert samples.dtype == np.float32
    assert audio_level(samples) == pytest.approx(0.5)
    assert audio_level(np.zeros(0, dtype=np.float32)) == 0.0


def test_receiver_keeps_incomplete_frame() -> None:
    receiver = AudioReceiver(frame_bytes=640)
    receiver.feed(b"\x00" * 1000)
    assert len(receiver.drain_frames()) == 1
    assert receiver.remaining_bytes() == 360
    receiver.feed(b"\x00" * 280)
    assert len(receiver.drain_frames()) == 1
    assert receiver.remaining_bytes() == 0


def test_silence_detected_after_min_duration() -> None:
    tracker = SilenceTracker(level_threshold=0.01, min_silence_ms=1000, sample_rate=16000)
    for _ in range(10):
        tracker.push(_frame(8000))
    assert not tracker.silence_detected
    for _ in range(40):
        tracker.push(_frame(0))
    assert not tracker.silence_detected
    for _ in range(20):
        tracker.push(_frame(0))
    assert tracker.silence_detected
    assert tracker.silence_duration == pytest.approx(1.2)


def test_loud_frame_ends_silence() -> None:
    tracker = SilenceTracker(level_threshold=0.01, min_silence_ms=100, sample_rate=16000)
    for _ in range(10):
        tracker.push(_frame(0))
    assert tracker.silence_detected
    tracker.push(_frame(8000))
    assert not tracker.silence_detected
    assert tracker.silence_duration == 0.0
    assert tracker.audio_time == pytest.approx(0.22)


def test_reset() -> None:
    tracker = SilenceTracker(level_threshold=0.01, min_silence_ms=20, sample_rate=16000)
    tracker.push(_frame(0))
    tracker.push(_frame(0))
    tracker.reset()
    assert tracker.audio_time == 0.0
    assert not tracker.silence_detected
