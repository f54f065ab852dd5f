"""
Finalize decision for the active buffer.

Checks run in order, first hit wins:

    force -> empty -> repetition ratio -> consecutive repeats
          -> [incomplete clause guard] -> word count -> silence
          -> max duration -> max sentences

Degenerate repetition beats everything, including the incomplete-clause guard:
an unbounded buffer is worse than a cut mid-clause. The guard only holds back
the word-count and silence rules; the duration and sentence-count ceilings
always fire so that every buffer eventually closes.
"""
from __future__ import annotations

import logging
import re

from interview_stream.segmentation.models import ActiveBuffer, SegmentationConfig
from interview_stream.segmentation.sentences import detect_sentence_boundaries

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SegmentationConfig()
_NON_WORD = re.compile(r"[^\w']+")

# Reasons returned by finalize_reason()
FORCED = "forced"
REPETITION_RATIO = "repetition_ratio"
CONSECUTIVE_REPEATS = "consecutive_repeats"
WORD_LIMIT = "word_limit"
SILENCE = "silence"
MAX_DURATION = "max_duration"
MAX_SENTENCES = "max_sentences"


def normalize_token(token: str) -> str:
    """Lowercase and drop surrounding punctuation: "Yeah," -> "yeah"."""
    return _NON_WORD.sub("", token.lower())


def _words(text: str) -> list[str]:
    return [w for w in (normalize_token(t) for t in text.split()) if w]


def repetition_ratio(text: str) -> float:
    """1 - unique/total over normalized tokens; 0.0 for empty text."""
    words = _words(text)
    if not words:
        return 0.0
    return 1.0 - len(set(words)) / len(words)


def max_consecutive_repeats(text: str) -> int:
    """Longest run of the same normalized token."""
    longest = 0
    run = 0
    previous = None
    for word in _words(text):
        run = run + 1 if word == previous else 1
        previous = word
        longest = max(longest, run)
    return longest


def ends_mid_clause(text: str, config: SegmentationConfig) -> bool:
    """True when the last word is a conjunction left open: "... and", "... because,".

    A terminator on the last token closes the clause, so "... when?" is complete.
    """
    for token in reversed(text.split()):
        if token.endswith(config.sentence_end_markers):
            return False
        word = normalize_token(token)
        if word:
            return word in config.incomplete_clause_words
    return False


def finalize_reason(
    buffer: ActiveBuffer,
    current_time: float,
    config: SegmentationConfig | None = None,
    force_segment: bool = False,
    silence_detected: bool = False,
) -> str | None:
    """Name of the rule that closes the buffer now, or None to keep accumulating."""
    config = config or _DEFAULT_CONFIG
    if force_segment:
        return FORCED

    text = buffer.text.strip()
    if not text:
        return None

    # Non-monotonic time from the caller counts as "no time elapsed".
    elapsed = max(0.0, current_time - buffer.start_time)

    if len(text) > config.emergency_min_chars and repetition_ratio(text) > config.max_repetition_ratio:
        return REPETITION_RATIO
    if max_consecutive_repeats(text) >= config.max_consecutive_repeats:
        return CONSECUTIVE_REPEATS

    complete = config.ends_with_terminator(text)
    if not ends_mid_clause(text, config):
        if complete and len(text.split()) >= config.max_words_per_segment:
            return WORD_LIMIT
        if silence_detected and complete and elapsed >= config.pause_threshold:
            return SILENCE

    if elapsed >= config.max_segment_duration:
        return MAX_DURATION
    sentences = detect_sentence_boundaries(text, config.sentence_end_markers)
    if len(sentences) >= config.max_sentences_per_segment:
        return MAX_SENTENCES
    return None


def should_create_new_segment(
    buffer: ActiveBuffer,
    current_time: float,
    config: SegmentationConfig | None = None,
    force_segment: bool = False,
    silence_detected: bool = False,
) -> bool:
    """True when the active buffer should be closed into a finalized segment now."""
    reason = finalize_reason(buffer, current_time, config, force_segment, silence_detected)
    if reason:
        logger.debug("finalize triggered by %s", reason)
    return reason is not None
