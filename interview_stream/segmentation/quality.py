"""Heuristic text quality scores for finalized transcript text."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Literal

from interview_stream.segmentation.models import DEFAULT_END_MARKERS
from interview_stream.segmentation.sentences import detect_sentence_boundaries

QualityLabel = Literal["high", "medium", "low"]

IDEAL_SENTENCE_WORDS = 15
LONG_WORD_CHARS = 6


@dataclass(frozen=True)
class TextQuality:
    complexity: float
    readability: float
    completeness: float
    quality: QualityLabel

    @property
    def score(self) -> float:
        return (self.complexity + self.readability + self.completeness) / 3

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def calculate_text_complexity(text: str, end_markers: Iterable[str] = DEFAULT_END_MARKERS) -> float:
    """0..1: mean of sentence-length score (20 words = 1.0) and long-word ratio."""
    words = text.split()
    sentences = detect_sentence_boundaries(text, end_markers)
    if not words or not sentences:
        return 0.0
    length_score = min(len(words) / len(sentences) / 20, 1.0)
    long_word_ratio = sum(1 for w in words if len(w) > LONG_WORD_CHARS) / len(words)
    return (length_score + long_word_ratio) / 2


def analyze_text_quality(text: str, end_markers: Iterable[str] = DEFAULT_END_MARKERS) -> TextQuality:
    markers = tuple(end_markers)
    sentences = detect_sentence_boundaries(text, markers)
    words = text.split()
    complexity = calculate_text_complexity(text, markers)

    if sentences:
        avg_words = len(words) / len(sentences)
        readability = min(1.0, max(0.0, 1 - (avg_words - IDEAL_SENTENCE_WORDS) / 20))
        terminated = sum(1 for s in sentences if s.endswith(markers))
        completeness = terminated / len(sentences)
    else:
        readability = 0.0
        completeness = 0.0

    score = (complexity + readability + completeness) / 3
    if score >= 0.7:
        label: QualityLabel = "high"
    elif score >= 0.4:
        label = "medium"
    else:
        label = "low"
    return TextQuality(complexity=complexity, readability=readability, completeness=completeness, quality=label)
