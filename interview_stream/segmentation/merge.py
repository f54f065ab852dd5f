"""
Text merge: reconcile a new transcription update with the buffered text.

Upstream transcribes a growing or sliding audio window, so consecutive updates
overlap heavily, are sometimes fully nested, and sometimes degenerate into
repeated filler. Without word timestamps we approximate "which words did the
speaker actually add":

1. one side empty          -> the other side
2. same text (trimmed)     -> existing
3. existing ⊇ incoming     -> existing (nothing new)
4. incoming ⊇ existing     -> incoming (provider re-transcribed from the start)
5. repetition guard        -> existing, when most new tokens were already heard
6. suffix/prefix overlap   -> existing + tokens of incoming past the overlap
7. runaway buffer          -> incoming alone (stuck buffer, start fresh)
8. fallback                -> existing + " " + incoming

The repetition guard looks only at incoming tokens past a detected overlap;
without overlap that is the whole update.
"""
from __future__ import annotations

import logging

from interview_stream.segmentation.models import SegmentationConfig

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = SegmentationConfig()

# Tokens this short ("a", "to", "of") repeat naturally and are not counted.
_MIN_COUNTED_TOKEN_LEN = 3


def longest_token_overlap(existing: list[str], incoming: list[str], max_tokens: int) -> int:
    """Largest k such that the last k tokens of existing equal the first k of incoming (case-insensitive)."""
    limit = min(max_tokens, len(existing), len(incoming))
    ex_lower = [t.lower() for t in existing]
    in_lower = [t.lower() for t in incoming]
    best = 0
    for k in range(1, limit + 1):
        if ex_lower[-k:] == in_lower[:k]:
            best = k
    return best


def repeated_token_fraction(known: list[str], candidate: list[str]) -> float:
    """Fraction of candidate tokens (longer than 2 chars) already present anywhere in known."""
    if not candidate:
        return 0.0
    known_set = {t.lower() for t in known}
    repeated = sum(
        1 for t in candidate if len(t) >= _MIN_COUNTED_TOKEN_LEN and t.lower() in known_set
    )
    return repeated / len(candidate)


def merge_text_intelligently(
    existing: str, incoming: str, config: SegmentationConfig | None = None
) -> str:
    """Return the buffered text extended by whatever incoming adds."""
    merged, rule = _merge(existing, incoming, config or _DEFAULT_CONFIG)
    logger.debug("merge rule=%s existing_len=%s incoming_len=%s", rule, len(existing), len(incoming))
    return merged


def _merge(existing: str, incoming: str, config: SegmentationConfig) -> tuple[str, str]:
    if not existing.strip():
        return incoming, "empty_existing"
    if not incoming.strip():
        return existing, "empty_incoming"

    ex = existing.strip()
    inc = incoming.strip()
    if ex == inc:
        return existing, "exact"
    if inc in ex:
        return existing, "contained"
    if ex in inc:
        return incoming, "superset"

    ex_tokens = ex.split()
    in_tokens = inc.split()
    overlap = longest_token_overlap(ex_tokens, in_tokens, config.merge_max_overlap_tokens)
    remainder = in_tokens[overlap:]
    if not remainder:
        return existing, "overlap_only"

    if repeated_token_fraction(ex_tokens, remainder) > config.merge_repetition_threshold:
        return existing, "repetition"

    if overlap:
        return f"{ex} {' '.join(remainder)}", "overlap"

    if len(ex) > config.merge_runaway_chars:
        logger.info("Buffer exceeded %s chars without overlap; restarting from update", config.merge_runaway_chars)
        return inc, "runaway"

    return f"{ex} {inc}", "append"
