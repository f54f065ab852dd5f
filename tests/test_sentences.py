from __future__ import annotations

from interview_stream.segmentation.sentences import detect_sentence_boundaries


def test_splits_on_terminator_followed_by_space() -> None:
    assert detect_sentence_boundaries("Hello there. How are you? Fine!") == [
        "Hello there.",
        "How are you?",
        "Fine!",
    ]


def test_trailing_fragment_is_last_sentence() -> None:
    assert detect_sentence_boundaries("I worked on it. Then we") == ["I worked on it.", "Then we"]


def test_terminator_inside_token_is_not_a_boundary() -> None:
    assert detect_sentence_boundaries("Latency dropped 3.5 times. Nice") == [
        "Latency dropped 3.5 times.",
        "Nice",
    ]


def test_newline_after_terminator_is_a_boundary() -> None:
    assert detect_sentence_boundaries("First one.\nSecond one.") == ["First one.", "Second one."]


def test_cjk_terminators() -> None:
    assert detect_sentence_boundaries("你好。 我很好！ 你呢？") == ["你好。", "我很好！", "你呢？"]


def test_cjk_terminator_followed_by_cjk_text_is_not_split() -> None:
    # Only space/newline/end close a sentence.
    assert detect_sentence_boundaries("你好。我很好。") == ["你好。我很好。"]


def test_empty_and_whitespace_input() -> None:
    assert detect_sentence_boundaries("") == []
    assert detect_sentence_boundaries("   ") == []


def test_custom_markers() -> None:
    assert detect_sentence_boundaries("one; two; three", end_markers=[";"]) == ["one;", "two;", "three"]
