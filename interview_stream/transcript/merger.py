"""
TranscriptMerger: feeds transcription updates to the segmentation processor and
publishes what the client should show.

- PARTIAL: the active buffer (merged text + latest translation); may still change.
- FINAL: one finalized TranscriptionSegment; immutable, append-only, in order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from interview_stream.segmentation.filters import UpdateFilter
from interview_stream.segmentation.models import TranscriptionSegment, unix_ms
from interview_stream.segmentation.processor import DEFAULT_CONFIDENCE, SmartSegmentationProcessor

logger = logging.getLogger(__name__)


@dataclass
class TranscriptMessage:
    """
    Message sent to the client.

    Partial messages carry the buffer (no segment); final messages carry the
    segment and the running stats.
    """

    type: str  # "partial" | "final"
    text: str
    translation: str
    timestamp: int  # unix_ms
    start_time: float | None = None  # stream-relative seconds
    end_time: float | None = None
    segment: TranscriptionSegment | None = None
    stats: dict[str, Any] | None = None
    is_final_segment: bool = False  # True for the segment flushed at stream stop

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type,
            "text": self.text,
            "translation": self.translation,
            "timestamp": self.timestamp,
        }
        if self.start_time is not None:
            payload["start_time"] = self.start_time
        if self.end_time is not None:
            payload["end_time"] = self.end_time
        if self.segment is not None:
            payload["segment"] = self.segment.to_dict()
        if self.stats is not None:
            payload["stats"] = self.stats
        if self.is_final_segment:
            payload["is_final_segment"] = True
        return payload


class TranscriptMerger:
    """
    Receives (text, translation) updates and invokes callback with TranscriptMessage.
    Not reentrant: one merger per session, calls serialized by the session loop.
    """

    def __init__(
        self,
        processor: SmartSegmentationProcessor,
        on_message: Callable[[TranscriptMessage], None],
        update_filter: UpdateFilter | None = None,
    ) -> None:
        self._processor = processor
        self._on_message = on_message
        self._filter = update_filter
        self._finished = False

    @property
    def processor(self) -> SmartSegmentationProcessor:
        return self._processor

    @property
    def finished(self) -> bool:
        return self._finished

    def on_update(
        self,
        text: str,
        translation: str,
        current_time: float,
        confidence: float = DEFAULT_CONFIDENCE,
        speaker: str | None = None,
        silence_detected: bool = False,
    ) -> TranscriptionSegment | None:
        """Process one update; emits partial and, if a segment closed, final."""
        if self._finished:
            logger.warning("Update after stream stop ignored (t=%.2f)", current_time)
            return None
        if self._filter is not None and not self._filter.accept(text, confidence):
            # Dropped text still lets a pause close the pending buffer.
            text, translation = "", ""

        result = self._processor.process_transcription_update(
            text,
            translation,
            current_time,
            confidence=confidence,
            speaker=speaker,
            silence_detected=silence_detected,
        )
        buf = result.updated_buffer
        if result.new_segment is not None:
            self._emit_final(result.new_segment)
        elif not buf.is_empty:
            self._on_message(
                TranscriptMessage(
                    type="partial",
                    text=buf.text,
                    translation=buf.translation,
                    timestamp=unix_ms(),
                    start_time=buf.start_time,
                    end_time=buf.last_update_time,
                )
            )
        return result.new_segment

    def finish(
        self, current_time: float, confidence: float = DEFAULT_CONFIDENCE, speaker: str | None = None
    ) -> TranscriptionSegment | None:
        """Stream stopped: flush the pending buffer once. Later calls return None."""
        if self._finished:
            return None
        self._finished = True
        segment = self._processor.finalize_pending_segment(current_time, confidence, speaker)
        if segment is not None:
            self._emit_final(segment, is_final_segment=True)
        return segment

    def _emit_final(self, segment: TranscriptionSegment, is_final_segment: bool = False) -> None:
        self._on_message(
            TranscriptMessage(
                type="final",
                text=segment.source_text,
                translation=segment.target_text,
                timestamp=segment.timestamp,
                start_time=segment.start_time,
                end_time=segment.end_time,
                segment=segment,
                stats=self._processor.get_segmentation_stats().to_dict(),
                is_final_segment=is_final_segment,
            )
        )
