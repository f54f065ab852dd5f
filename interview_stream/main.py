"""
FastAPI app: WebSocket endpoint for live transcript segmentation;
HTTP API: per-session updates, segments, stats, config and text quality.

WebSocket client sends JSON updates {type, text, translation, time, ...} and
optional binary PCM 16-bit mono 16kHz (silence tracking). Server responds with JSON:
{ "type": "session" | "partial" | "final" | "stopped" | "error", ... }
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect

from interview_stream.config import get_settings
from interview_stream.logging_setup import setup_logging
from interview_stream.schemas.segments import (
    BufferOut,
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
from interview_stream.segmentation.processor import SmartSegmentationProcessor
from interview_stream.segmentation.quality import analyze_text_quality
from interview_stream.session_store import (
    create_session,
    default_config,
    delete_session,
    get_session,
    mark_finalized,
)
from interview_stream.websocket_manager import WebSocketManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings())
    yield


app = FastAPI(
    title="Interview Transcript Segmentation",
    description="Turns overlapping live transcription updates into finalized, translated segments",
    lifespan=lifespan,
)


@app.websocket("/ws/segments")
async def websocket_segments(websocket: WebSocket) -> None:
    """
    WebSocket: one connection = one recording session.
    Server sends the session id first, then partial/final messages per update.
    """
    await websocket.accept()
    manager = WebSocketManager(websocket)
    try:
        await manager.run()
    except WebSocketDisconnect:
        return
    try:
        await websocket.close()
    except Exception:
        pass


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


def _require_session(session_id: str) -> dict:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _session_out(session_id: str, session: dict) -> SessionOut:
    processor: SmartSegmentationProcessor = session["processor"]
    return SessionOut(
        session_id=session_id,
        finalized=session["finalized"],
        config=ConfigOut.from_config(processor.get_config()),
    )


@app.post("/api/sessions", response_model=SessionOut)
async def create_session_endpoint(request: CreateSessionRequest | None = None) -> SessionOut:
    overrides = request.config.changes() if request and request.config else None
    session_id = create_session(overrides)
    return _session_out(session_id, _require_session(session_id))


@app.get("/api/sessions/{session_id}", response_model=SessionOut)
async def get_session_endpoint(session_id: str) -> SessionOut:
    return _session_out(session_id, _require_session(session_id))


@app.delete("/api/sessions/{session_id}")
async def delete_session_endpoint(session_id: str) -> dict:
    if not delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"deleted": True}


@app.post("/api/sessions/{session_id}/updates", response_model=ProcessResponse)
async def post_update(session_id: str, update: TranscriptionUpdate) -> ProcessResponse:
    """Process one transcription update; returns the segment it closed, if any."""
    session = _require_session(session_id)
    if session["finalized"]:
        raise HTTPException(status_code=409, detail="Session already finalized; clear it to record again")
    processor: SmartSegmentationProcessor = session["processor"]
    result = processor.process_transcription_update(
        update.text,
        update.translation,
        update.time,
        confidence=update.confidence,
        speaker=update.speaker,
        silence_detected=bool(update.silence),
    )
    return ProcessResponse(
        new_segment=SegmentOut.from_segment(result.new_segment) if result.new_segment else None,
        buffer=BufferOut.from_buffer(result.updated_buffer),
    )


@app.post("/api/sessions/{session_id}/finalize", response_model=SegmentOut | None)
async def finalize_session(session_id: str, request: FinalizeRequest) -> SegmentOut | None:
    """Stream stopped: flush the pending buffer. Returns null when nothing was pending."""
    session = _require_session(session_id)
    processor: SmartSegmentationProcessor = session["processor"]
    segment = processor.finalize_pending_segment(request.time, request.confidence)
    mark_finalized(session_id)
    return SegmentOut.from_segment(segment) if segment else None


@app.get("/api/sessions/{session_id}/segments", response_model=list[SegmentOut])
async def list_segments(session_id: str) -> list[SegmentOut]:
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    return [SegmentOut.from_segment(s) for s in processor.get_all_segments()]


@app.delete("/api/sessions/{session_id}/segments")
async def clear_segments(session_id: str) -> dict:
    """Wipe history and buffer; the session can record again."""
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    processor.clear_all_segments()
    mark_finalized(session_id, False)
    return {"cleared": True}


@app.get("/api/sessions/{session_id}/buffer", response_model=BufferOut)
async def get_buffer(session_id: str) -> BufferOut:
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    return BufferOut.from_buffer(processor.buffer)


@app.get("/api/sessions/{session_id}/stats", response_model=StatsOut)
async def get_stats(session_id: str) -> StatsOut:
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    return StatsOut.from_stats(processor.get_segmentation_stats())


@app.get("/api/sessions/{session_id}/config", response_model=ConfigOut)
async def get_config(session_id: str) -> ConfigOut:
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    return ConfigOut.from_config(processor.get_config())


@app.patch("/api/sessions/{session_id}/config", response_model=ConfigOut)
async def patch_config(session_id: str, patch: ConfigPatch) -> ConfigOut:
    processor: SmartSegmentationProcessor = _require_session(session_id)["processor"]
    changes = patch.changes()
    if changes:
        processor.update_config(**changes)
    return ConfigOut.from_config(processor.get_config())


@app.post("/api/quality", response_model=QualityResponse)
async def text_quality(request: QualityRequest) -> QualityResponse:
    quality = analyze_text_quality(request.text, default_config().sentence_end_markers)
    return QualityResponse(**quality.to_dict())
