"""Segmentation core: merge overlapping transcription updates into finalized segments."""
from .decision import finalize_reason, should_create_new_segment
from .filters import UpdateFilter
from .merge import merge_text_intelligently
from .models import (
    ActiveBuffer,
    ProcessResult,
    SegmentationConfig,
    SegmentationStats,
    TranscriptionSegment,
)
from .processor import SmartSegmentationProcessor
from .quality import TextQuality, analyze_text_quality, calculate_text_complexity
from .sentences import detect_sentence_boundaries

__all__ = [
    "ActiveBuffer",
    "ProcessResult",
    "SegmentationConfig",
    "SegmentationStats",
    "SmartSegmentationProcessor",
    "TextQuality",
    "TranscriptionSegment",
    "UpdateFilter",
    "analyze_text_quality",
    "calculate_text_complexity",
    "detect_sentence_boundaries",
    "finalize_reason",
    "merge_text_intelligently",
    "should_create_new_segment",
]
