"""
SilenceTracker: turns PCM frames into the silence_detected signal.

Level of a frame = mean absolute amplitude of its float32 samples. A frame below
SILENCE_LEVEL_THRESHOLD starts or extends a silent run; any louder frame ends
it. silence_detected is True while the current run has lasted SILENCE_MIN_MS.
Time is audio time (frames seen x frame duration), not wall clock.
"""
from __future__ import annotations

import numpy as np

from interview_stream.config import get_settings


def pcm_bytes_to_float32(pcm_bytes: bytes) -> np.ndarray:
    """Convert PCM 16-bit mono bytes to float32 [-1.0, 1.0]."""
    samples = np.frombuffer(pcm_bytes, dtype=np.int16)
    return samples.astype(np.float32) / 32768.0


def audio_level(samples: np.ndarray) -> float:
    if samples.size == 0:
        return 0.0
    return float(np.mean(np.abs(samples)))


class SilenceTracker:
    def __init__(
        self,
        level_threshold: float | None = None,
        min_silence_ms: int | None = None,
        sample_rate: int | None = None,
    ) -> None:
        settings = get_settings()
        self._threshold = level_threshold if level_threshold is not None else settings.SILENCE_LEVEL_THRESHOLD
        self._min_silence_sec = (min_silence_ms if min_silence_ms is not None else settings.SILENCE_MIN_MS) / 1000.0
        self._sample_rate = sample_rate or settings.SAMPLE_RATE
        self._audio_time = 0.0
        self._silence_start: float | None = None

    def push(self, frame: bytes) -> float:
        """Account one PCM frame; returns its level."""
        samples = pcm_bytes_to_float32(frame)
        level = audio_level(samples)
        if level < self._threshold:
            if self._silence_start is None:
                self._silence_start = self._audio_time
        else:
            self._silence_start = None
        self._audio_time += samples.size / self._sample_rate
        return level

    @property
    def audio_time(self) -> float:
        """Seconds of audio seen so far."""
        return self._audio_time

    @property
    def silence_duration(self) -> float:
        if self._silence_start is None:
            return 0.0
        return self._audio_time - self._silence_start

    @property
    def silence_detected(self) -> bool:
        return self._silence_start is not None and self.silence_duration >= self._min_silence_sec

    def reset(self) -> None:
        self._audio_time = 0.0
        self._silence_start = None
