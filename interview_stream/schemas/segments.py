"""
Schemas for the segmentation API (REST and WebSocket frames).

Validation lives here: the segmentation core assumes well-typed input and
never raises, so anything malformed is rejected at this layer.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from interview_stream.segmentation.models import (
    ActiveBuffer,
    SegmentationConfig,
    SegmentationStats,
    TranscriptionSegment,
)

SpeakerName = Literal["interviewer", "candidate", "unknown"]


class TranscriptionUpdate(BaseModel):
    """One (text, translation) pair from the upstream transcription/translation pipeline."""

    text: str = Field("", description="Speech recognized so far in the current audio window")
    translation: str = Field("", description="Translation of the whole accumulated text")
    time: float = Field(..., description="Stream-relative seconds; non-decreasing per session")
    confidence: float = Field(0.9, ge=0.0, le=1.0, description="Transcription confidence 0–1")
    speaker: SpeakerName | None = Field(None, description="Speaker, when known")
    silence: bool | None = Field(
        None,
        description="Pause detected since previous update; WebSocket falls back to audio-level tracking when omitted",
    )


class ClientFrame(TranscriptionUpdate):
    """Text frame sent by the WebSocket client."""

    type: Literal["update", "stop"] = "update"
    time: float | None = Field(None, description="Required for updates; a stop without it ends at the last update time")

    @model_validator(mode="after")
    def _require_update_time(self) -> "ClientFrame":
        if self.time is None:
            if self.type == "update":
                raise ValueError("update frame requires time")
            self.time = 0.0
        return self


class FinalizeRequest(BaseModel):
    time: float = Field(..., description="Stream-relative seconds at stop")
    confidence: float = Field(0.9, ge=0.0, le=1.0)


class ConfigPatch(BaseModel):
    """Partial segmentation config; unset fields keep their current value."""

    model_config = ConfigDict(extra="forbid")

    max_sentences_per_segment: int | None = Field(None, ge=1)
    min_segment_duration: float | None = Field(None, ge=0.0)
    max_segment_duration: float | None = Field(None, gt=0.0)
    pause_threshold: float | None = Field(None, ge=0.0)
    sentence_end_markers: list[str] | None = Field(None, min_length=1)
    max_words_per_segment: int | None = Field(None, ge=1)
    incomplete_clause_words: list[str] | None = None
    emergency_min_chars: int | None = Field(None, ge=0)
    max_repetition_ratio: float | None = Field(None, ge=0.0, le=1.0)
    max_consecutive_repeats: int | None = Field(None, ge=2)
    merge_repetition_threshold: float | None = Field(None, ge=0.0, le=1.0)
    merge_max_overlap_tokens: int | None = Field(None, ge=1)
    merge_runaway_chars: int | None = Field(None, ge=1)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class ConfigOut(BaseModel):
    max_sentences_per_segment: int
    min_segment_duration: float
    max_segment_duration: float
    pause_threshold: float
    sentence_end_markers: list[str]
    max_words_per_segment: int
    incomplete_clause_words: list[str]
    emergency_min_chars: int
    max_repetition_ratio: float
    max_consecutive_repeats: int
    merge_repetition_threshold: float
    merge_max_overlap_tokens: int
    merge_runaway_chars: int

    @classmethod
    def from_config(cls, config: SegmentationConfig) -> "ConfigOut":
        return cls(**config.to_dict())


class CreateSessionRequest(BaseModel):
    config: ConfigPatch | None = None


class SessionOut(BaseModel):
    session_id: str
    finalized: bool = False
    config: ConfigOut


class SegmentOut(BaseModel):
    id: str
    timestamp: int
    start_time: float
    end_time: float
    source_text: str
    target_text: str
    speaker: SpeakerName
    confidence: float
    word_count: int
    is_complete: bool

    @classmethod
    def from_segment(cls, segment: TranscriptionSegment) -> "SegmentOut":
        return cls(**segment.to_dict())


class BufferOut(BaseModel):
    text: str
    translation: str
    start_time: float
    last_update_time: float
    sentences: list[str]

    @classmethod
    def from_buffer(cls, buffer: ActiveBuffer) -> "BufferOut":
        return cls(
            text=buffer.text,
            translation=buffer.translation,
            start_time=buffer.start_time,
            last_update_time=buffer.last_update_time,
            sentences=list(buffer.sentences),
        )


class ProcessResponse(BaseModel):
    new_segment: SegmentOut | None = None
    buffer: BufferOut


class StatsOut(BaseModel):
    total_segments: int
    total_duration: float
    average_segment_duration: float
    completed_segments: int
    total_words: int
    average_words_per_segment: float

    @classmethod
    def from_stats(cls, stats: SegmentationStats) -> "StatsOut":
        return cls(**stats.to_dict())


class QualityRequest(BaseModel):
    text: str = Field(..., description="Text to score")


class QualityResponse(BaseModel):
    complexity: float
    readability: float
    completeness: float
    quality: Literal["high", "medium", "low"]
