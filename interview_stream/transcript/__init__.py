"""Transcript handling: partial (buffer) vs final (segment) messages."""
from .merger import TranscriptMerger, TranscriptMessage

__all__ = ["TranscriptMerger", "TranscriptMessage"]
