"""
UpdateFilter: drops transcription updates that are most likely hallucinations.

Whisper-style providers emit short filler ("Thank you.", "you", "um") on
near-silent audio, usually with low confidence. Such updates are rejected
before they reach the segment buffer.
"""
from __future__ import annotations

import logging
from typing import Iterable

from interview_stream.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_NOISE_WORDS: tuple[str, ...] = ("thank you", "bye", "you", "um", "uh", "yeah")


class UpdateFilter:
    def __init__(
        self,
        min_confidence: float = 0.6,
        noise_words: Iterable[str] = DEFAULT_NOISE_WORDS,
        noise_max_chars: int = 10,
        enabled: bool = True,
    ) -> None:
        self._min_confidence = min_confidence
        self._noise_words = tuple(w.lower() for w in noise_words)
        self._noise_max_chars = noise_max_chars
        self._enabled = enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpdateFilter":
        return cls(
            min_confidence=settings.MIN_CONFIDENCE_SCORE,
            noise_words=settings.noise_words,
            noise_max_chars=settings.NOISE_MAX_CHARS,
            enabled=settings.UPDATE_FILTER_ENABLED,
        )

    def rejection_reason(self, text: str, confidence: float) -> str | None:
        """Why the update should be dropped, or None to accept it."""
        stripped = (text or "").strip()
        if not stripped:
            return "empty"
        if not self._enabled:
            return None
        if confidence < self._min_confidence:
            return "low_confidence"
        lowered = stripped.lower()
        if len(stripped) < self._noise_max_chars and any(w in lowered for w in self._noise_words):
            return "noise"
        return None

    def accept(self, text: str, confidence: float) -> bool:
        reason = self.rejection_reason(text, confidence)
        if reason and reason != "empty":
            logger.info("Update dropped (%s): %r confidence=%.2f", reason, text, confidence)
        return reason is None
