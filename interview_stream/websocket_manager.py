"""
WebSocketManager: one WebSocket = one recording session.

Text frames carry transcription updates ({"type": "update", ...}) or the stop
signal ({"type": "stop", "time": ...}). Binary frames carry raw PCM used only
to track silence for updates that do not state it. The pending segment is
flushed exactly once, on stop or on disconnect, whichever comes first.
Segments stay readable via the REST API after the socket closes.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError

from interview_stream.audio import AudioReceiver, SilenceTracker
from interview_stream.config import get_settings
from interview_stream.schemas.segments import ClientFrame
from interview_stream.segmentation.filters import UpdateFilter
from interview_stream.session_store import create_session, get_processor, mark_finalized
from interview_stream.transcript.merger import TranscriptMerger, TranscriptMessage

logger = logging.getLogger(__name__)


class WebSocketManager:
    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket
        settings = get_settings()
        self._receiver = AudioReceiver()
        self._silence = SilenceTracker()
        self._session_id = create_session()
        self._outbox: list[TranscriptMessage] = []
        self._merger = TranscriptMerger(
            get_processor(self._session_id),
            on_message=self._outbox.append,
            update_filter=UpdateFilter.from_settings(settings),
        )
        self._last_time = 0.0
        self._closed = False

    @property
    def session_id(self) -> str:
        return self._session_id

    async def _send_json(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._ws.send_text(json.dumps(payload, ensure_ascii=False))
        except Exception:
            self._closed = True

    async def _flush_outbox(self) -> None:
        while self._outbox:
            msg = self._outbox.pop(0)
            await self._send_json(msg.to_dict())

    def _on_audio(self, data: bytes) -> None:
        self._receiver.feed(data)
        for frame in self._receiver.drain_frames():
            self._silence.push(frame)

    async def _on_text(self, raw: str) -> bool:
        """Handle one client text frame. Returns False when the client asked to stop."""
        try:
            frame = ClientFrame.model_validate_json(raw)
        except ValidationError as e:
            logger.info("Session %s: invalid frame: %s", self._session_id, e.errors()[:1])
            await self._send_json({"type": "error", "detail": "invalid frame"})
            return True

        self._last_time = max(self._last_time, frame.time)
        if frame.type == "stop":
            self._merger.finish(self._last_time, speaker=frame.speaker)
            await self._flush_outbox()
            await self._send_json({"type": "stopped", "session_id": self._session_id})
            return False

        silence = frame.silence if frame.silence is not None else self._silence.silence_detected
        self._merger.on_update(
            frame.text,
            frame.translation,
            frame.time,
            confidence=frame.confidence,
            speaker=frame.speaker,
            silence_detected=silence,
        )
        await self._flush_outbox()
        return True

    async def run(self) -> None:
        """Main loop: receive frames until stop or disconnect, then flush the pending segment."""
        await self._send_json({"type": "session", "session_id": self._session_id})
        logger.info("Session %s started", self._session_id)
        try:
            while not self._closed:
                try:
                    msg = await self._ws.receive()
                except Exception:
                    break
                if msg.get("type") == "websocket.disconnect":
                    break
                data = msg.get("bytes")
                if data is not None:
                    self._on_audio(data)
                    continue
                text = msg.get("text")
                if text is None:
                    continue
                if not await self._on_text(text):
                    break
        finally:
            # Flush before the first await so a cancelled connection still keeps its tail.
            if not self._merger.finished:
                self._merger.finish(max(self._last_time, self._silence.audio_time))
            mark_finalized(self._session_id)
            stats = self._merger.processor.get_segmentation_stats()
            logger.info(
                "Session %s finished: segments=%s words=%s",
                self._session_id,
                stats.total_segments,
                stats.total_words,
            )
            await self._flush_outbox()
