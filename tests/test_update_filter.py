from __future__ import annotations

from interview_stream.config import Settings
from interview_stream.segmentation.filters import UpdateFilter


def test_accepts_regular_speech() -> None:
    f = UpdateFilter()
    assert f.accept("I designed the caching layer", 0.9)


def test_rejects_low_confidence() -> None:
    assert UpdateFilter().rejection_reason("I designed the caching layer", 0.3) == "low_confidence"


def test_rejects_short_filler() -> None:
    f = UpdateFilter()
    assert f.rejection_reason("Thank you", 0.95) == "noise"
    assert f.rejection_reason(" um ", 0.95) == "noise"


def test_long_text_with_noise_word_is_kept() -> None:
    assert UpdateFilter().accept("Thank you for having me today", 0.95)


def test_empty_is_rejected_even_when_disabled() -> None:
    f = UpdateFilter(enabled=False)
    assert f.rejection_reason("  ", 0.9) == "empty"
    assert f.accept("um", 0.1)


def test_from_settings() -> None:
    settings = Settings(MIN_CONFIDENCE_SCORE=0.2, NOISE_WORDS="hmm, ok", NOISE_MAX_CHARS=5)
    f = UpdateFilter.from_settings(settings)
    assert f.accept("I see", 0.3)
    assert f.rejection_reason("hmm", 0.9) == "noise"
    assert f.rejection_reason("fine", 0.1) == "low_confidence"
