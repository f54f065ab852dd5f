"""
Sentence boundary detection over Latin and CJK text.

A configured terminator closes a sentence only when followed by end of text,
a space or a newline, so "3.5" or "e.g.x" stay inside one sentence. A trailing
fragment without terminator is returned as a last, unterminated sentence.
"""
from __future__ import annotations

from typing import Iterable

from interview_stream.segmentation.models import DEFAULT_END_MARKERS

_BOUNDARY_FOLLOWERS = (" ", "\n")


def detect_sentence_boundaries(
    text: str, end_markers: Iterable[str] = DEFAULT_END_MARKERS
) -> list[str]:
    """Split text into trimmed, non-empty sentences."""
    markers = set(end_markers)
    sentences: list[str] = []
    current: list[str] = []
    n = len(text)
    i = 0
    while i < n:
        char = text[i]
        current.append(char)
        if char in markers:
            next_char = text[i + 1] if i + 1 < n else ""
            if not next_char or next_char in _BOUNDARY_FOLLOWERS:
                sentence = "".join(current).strip()
                if sentence:
                    sentences.append(sentence)
                current = []
        i += 1

    tail = "".join(current).strip()
    if tail:
        sentences.append(tail)
    return sentences
