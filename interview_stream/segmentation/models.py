"""
Segmentation data model.

- SegmentationConfig: immutable per processor; replaced wholesale on update.
- ActiveBuffer: the single in-progress segment (mutable, owned by the processor).
- TranscriptionSegment: finalized, immutable once appended to the history.

Field naming: source_text / target_text are the spoken text and its translation.
The historical names english_text / chinese_text are kept as read-only aliases;
the mechanism itself is language-agnostic.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import asdict, dataclass, field, replace
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from interview_stream.config import Settings

Speaker = Literal["interviewer", "candidate", "unknown"]
SPEAKERS: tuple[str, ...] = ("interviewer", "candidate", "unknown")

DEFAULT_END_MARKERS: tuple[str, ...] = (".", "!", "?", "。", "！", "？")

# A buffer ending on one of these is mid-clause; English only (see DESIGN.md).
DEFAULT_INCOMPLETE_CLAUSE_WORDS: frozenset[str] = frozenset(
    {
        "and", "but", "or", "so", "because", "that", "which", "who",
        "when", "where", "how", "what", "if", "although", "while",
    }
)


@dataclass(frozen=True)
class SegmentationConfig:
    """Thresholds for merge and finalize decisions. Defaults match Settings defaults."""

    max_sentences_per_segment: int = 8
    min_segment_duration: float = 15.0
    max_segment_duration: float = 60.0
    pause_threshold: float = 5.0
    sentence_end_markers: tuple[str, ...] = DEFAULT_END_MARKERS
    max_words_per_segment: int = 120
    incomplete_clause_words: frozenset[str] = DEFAULT_INCOMPLETE_CLAUSE_WORDS
    # Degenerate-repetition emergency exits
    emergency_min_chars: int = 500
    max_repetition_ratio: float = 0.4
    max_consecutive_repeats: int = 3
    # Merge engine
    merge_repetition_threshold: float = 0.5
    merge_max_overlap_tokens: int = 15
    merge_runaway_chars: int = 2000

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SegmentationConfig":
        return cls(
            max_sentences_per_segment=settings.SEGMENT_MAX_SENTENCES,
            min_segment_duration=settings.SEGMENT_MIN_DURATION,
            max_segment_duration=settings.SEGMENT_MAX_DURATION,
            pause_threshold=settings.SEGMENT_PAUSE_THRESHOLD,
            sentence_end_markers=settings.sentence_end_markers or DEFAULT_END_MARKERS,
            max_words_per_segment=settings.SEGMENT_MAX_WORDS,
            emergency_min_chars=settings.SEGMENT_EMERGENCY_MIN_CHARS,
            max_repetition_ratio=settings.SEGMENT_MAX_REPETITION_RATIO,
            max_consecutive_repeats=settings.SEGMENT_MAX_CONSECUTIVE_REPEATS,
            merge_repetition_threshold=settings.MERGE_REPETITION_THRESHOLD,
            merge_max_overlap_tokens=settings.MERGE_MAX_OVERLAP_TOKENS,
            merge_runaway_chars=settings.MERGE_RUNAWAY_CHARS,
        )

    def with_changes(self, **changes: Any) -> "SegmentationConfig":
        """Return a new config; list values for set/tuple fields are coerced."""
        if "sentence_end_markers" in changes:
            changes["sentence_end_markers"] = tuple(changes["sentence_end_markers"])
        if "incomplete_clause_words" in changes:
            changes["incomplete_clause_words"] = frozenset(
                w.lower() for w in changes["incomplete_clause_words"]
            )
        return replace(self, **changes)

    def ends_with_terminator(self, text: str) -> bool:
        stripped = text.strip()
        return bool(stripped) and stripped[-1] in self.sentence_end_markers

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["sentence_end_markers"] = list(self.sentence_end_markers)
        data["incomplete_clause_words"] = sorted(self.incomplete_clause_words)
        return data


@dataclass(frozen=True)
class TranscriptionSegment:
    """
    One finalized transcript unit. Never mutated after creation.

    start_time, end_time: stream-relative seconds (end_time >= start_time).
    timestamp: wall-clock creation time, unix ms.
    """

    id: str
    timestamp: int
    start_time: float
    end_time: float
    source_text: str
    target_text: str
    speaker: Speaker
    confidence: float
    word_count: int
    is_complete: bool

    @property
    def english_text(self) -> str:
        return self.source_text

    @property
    def chinese_text(self) -> str:
        return self.target_text

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def new_segment_id() -> str:
    return f"segment-{uuid.uuid4().hex[:12]}"


def unix_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ActiveBuffer:
    """The in-progress segment. Empty (text == "") means no pending segment."""

    text: str = ""
    translation: str = ""
    start_time: float = 0.0
    last_update_time: float = 0.0
    sentences: list[str] = field(default_factory=list)
    confidence: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def snapshot(self) -> "ActiveBuffer":
        return replace(self, sentences=list(self.sentences))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SegmentationStats:
    total_segments: int = 0
    total_duration: float = 0.0
    average_segment_duration: float = 0.0
    completed_segments: int = 0
    total_words: int = 0
    average_words_per_segment: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one update: the segment finalized by it (if any) and the buffer after it."""

    new_segment: TranscriptionSegment | None
    updated_buffer: ActiveBuffer
