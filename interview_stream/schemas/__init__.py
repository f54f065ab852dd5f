"""Pydantic schemas for API request/response."""
from interview_stream.schemas.segments import (
    BufferOut,
    ClientFrame,
    ConfigOut,
    ConfigPatch,
    CreateSessionRequest,
    FinalizeRequest,
    ProcessResponse,
    QualityRequest,
    QualityResponse,
    SegmentOut,
    SessionOut,
    StatsOut,
    TranscriptionUpdate,
)

__all__ = [
    "BufferOut",
    "ClientFrame",
    "ConfigOut",
    "ConfigPatch",
    "CreateSessionRequest",
    "FinalizeRequest",
    "ProcessResponse",
    "QualityRequest",
    "QualityResponse",
    "SegmentOut",
    "SessionOut",
    "StatsOut",
    "TranscriptionUpdate",
]
