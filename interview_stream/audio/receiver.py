"""
AudioReceiver: splits raw PCM from binary WebSocket messages into fixed frames.

- Expects PCM 16-bit mono 16kHz.
- Frames (e.g. 20ms = 640 bytes) feed the silence tracker; audio is not transcribed here.
"""
from __future__ import annotations

from interview_stream.config import get_settings


class AudioReceiver:
    """Buffers incoming bytes; any incomplete frame is kept for the next feed()."""

    def __init__(self, frame_bytes: int | None = None) -> None:
        settings = get_settings()
        self._frame_bytes = frame_bytes or settings.FRAME_BYTES
        self._buffer = bytearray()

    def feed(self, data: bytes) -> None:
        self._buffer.extend(data)

    def drain_frames(self) -> list[bytes]:
        """Return all complete frames; remainder stays in buffer."""
        out: list[bytes] = []
        while len(self._buffer) >= self._frame_bytes:
            out.append(bytes(self._buffer[: self._frame_bytes]))
            del self._buffer[: self._frame_bytes]
        return out

    def remaining_bytes(self) -> int:
        """Bytes left in buffer (incomplete frame)."""
        return len(self._buffer)
