"""
SmartSegmentationProcessor: one instance per recording session.

Owns the config, the finalized segment history and the single active buffer.
Every call is synchronous and does no I/O; callers serialize calls per
instance (one WebSocket loop per session does that naturally). Independent
sessions use independent instances; nothing is shared between them.
"""
from __future__ import annotations

import logging
from typing import Any

from interview_stream.segmentation.decision import finalize_reason
from interview_stream.segmentation.merge import merge_text_intelligently
from interview_stream.segmentation.models import (
    SPEAKERS,
    ActiveBuffer,
    ProcessResult,
    SegmentationConfig,
    SegmentationStats,
    TranscriptionSegment,
    new_segment_id,
    unix_ms,
)
from interview_stream.segmentation.quality import TextQuality, analyze_text_quality
from interview_stream.segmentation.sentences import detect_sentence_boundaries

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.9


class SmartSegmentationProcessor:
    """
    Turns overlapping transcription updates into ordered, de-duplicated segments.

    process_transcription_update() merges each update into the active buffer
    and finalizes it when the decision rules fire. finalize_pending_segment()
    must be called once when the stream stops so the trailing text is kept.
    """

    def __init__(self, config: SegmentationConfig | None = None, **overrides: Any) -> None:
        base = config or SegmentationConfig()
        self._config = base.with_changes(**overrides) if overrides else base
        self._segments: list[TranscriptionSegment] = []
        self._buffer = ActiveBuffer()

    def process_transcription_update(
        self,
        new_text: str,
        translation: str,
        current_time: float,
        confidence: float = DEFAULT_CONFIDENCE,
        speaker: str | None = None,
        silence_detected: bool = False,
    ) -> ProcessResult:
        """
        Merge one (text, translation) pair into the buffer; maybe emit a segment.

        translation is expected to cover the whole accumulated text, so it
        replaces the buffered one instead of being merged. Empty text leaves the
        buffer untouched but still lets silence or a ceiling close it.
        """
        new_text = new_text or ""
        translation = translation or ""
        logger.debug("update t=%.2f text=%r", current_time, new_text[:50])

        buf = self._buffer
        if new_text.strip():
            if buf.is_empty:
                buf.start_time = current_time
                buf.confidence = 0.0
            buf.text = merge_text_intelligently(buf.text, new_text, self._config).strip()
            buf.sentences = detect_sentence_boundaries(buf.text, self._config.sentence_end_markers)
            buf.last_update_time = current_time
            buf.confidence = max(buf.confidence, _clamp(confidence))
        if translation.strip() and not buf.is_empty:
            buf.translation = translation

        new_segment = None
        reason = finalize_reason(buf, current_time, self._config, silence_detected=silence_detected)
        if reason:
            new_segment = self._create_segment_from_buffer(current_time, buf.confidence, speaker, reason)
            self._reset_buffer()

        return ProcessResult(new_segment=new_segment, updated_buffer=self._buffer.snapshot())

    def finalize_pending_segment(
        self, current_time: float, confidence: float = DEFAULT_CONFIDENCE, speaker: str | None = None
    ) -> TranscriptionSegment | None:
        """Force-close the active buffer (stream stopped). None when nothing is pending."""
        if self._buffer.is_empty:
            return None
        confidence = max(self._buffer.confidence, _clamp(confidence))
        segment = self._create_segment_from_buffer(current_time, confidence, speaker, "forced")
        self._reset_buffer()
        return segment

    def _create_segment_from_buffer(
        self, current_time: float, confidence: float, speaker: str | None, reason: str
    ) -> TranscriptionSegment:
        buf = self._buffer
        text = buf.text.strip()
        end_time = max(current_time, buf.start_time)
        # Keep history ordered even when the caller's clock went backwards.
        start_time = buf.start_time
        if self._segments:
            previous_end = self._segments[-1].end_time
            start_time = max(start_time, previous_end)
            end_time = max(end_time, start_time)

        segment = TranscriptionSegment(
            id=new_segment_id(),
            timestamp=unix_ms(),
            start_time=start_time,
            end_time=end_time,
            source_text=text,
            target_text=buf.translation.strip(),
            speaker=speaker if speaker in SPEAKERS else "unknown",
            confidence=confidence,
            word_count=len(text.split()),
            is_complete=self._config.ends_with_terminator(text),
        )
        self._segments.append(segment)
        logger.info(
            "Segment %s created (%s): duration=%.1fs words=%s complete=%s",
            segment.id,
            reason,
            segment.duration,
            segment.word_count,
            segment.is_complete,
        )
        return segment

    def _reset_buffer(self) -> None:
        self._buffer = ActiveBuffer()

    @property
    def buffer(self) -> ActiveBuffer:
        """Copy of the active buffer."""
        return self._buffer.snapshot()

    def get_all_segments(self) -> list[TranscriptionSegment]:
        return list(self._segments)

    def get_segmentation_stats(self) -> SegmentationStats:
        count = len(self._segments)
        if not count:
            return SegmentationStats()
        total_duration = sum(s.duration for s in self._segments)
        total_words = sum(s.word_count for s in self._segments)
        return SegmentationStats(
            total_segments=count,
            total_duration=total_duration,
            average_segment_duration=total_duration / count,
            completed_segments=sum(1 for s in self._segments if s.is_complete),
            total_words=total_words,
            average_words_per_segment=total_words / count,
        )

    def clear_all_segments(self) -> None:
        """Drop history and the pending buffer (new recording session)."""
        self._segments = []
        self._reset_buffer()

    def update_config(self, **changes: Any) -> SegmentationConfig:
        self._config = self._config.with_changes(**changes)
        logger.info("Segmentation config updated: %s", sorted(changes))
        return self._config

    def get_config(self) -> SegmentationConfig:
        return self._config

    def analyze_text_quality(self, text: str) -> TextQuality:
        return analyze_text_quality(text, self._config.sentence_end_markers)


def _clamp(confidence: float) -> float:
    return min(1.0, max(0.0, float(confidence)))
