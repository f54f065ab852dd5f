"""
In-memory session store. One session = one recording = one independent
SmartSegmentationProcessor; sessions never share buffers or history.

session_id is generated on the backend (WebSocket connect or POST /api/sessions).
Finalized sessions are evicted SESSION_RETENTION_SECONDS after they stop; the
sweep runs whenever a new session is created. Sessions that are never
finalized (REST clients that never call finalize) stay until deleted.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from interview_stream.config import get_settings
from interview_stream.segmentation.models import SegmentationConfig
from interview_stream.segmentation.processor import SmartSegmentationProcessor

logger = logging.getLogger(__name__)

# session_id -> {
#   "processor": SmartSegmentationProcessor,
#   "created_at": float,
#   "finalized": bool,        # stream stopped and pending buffer flushed
#   "finalized_at": float | None,
# }
_session_store: dict[str, dict[str, Any]] = {}


def generate_session_id() -> str:
    """Generate a new session_id (UUID hex, 12 chars). Backend only."""
    return uuid.uuid4().hex[:12]


def default_config() -> SegmentationConfig:
    return SegmentationConfig.from_settings(get_settings())


def evict_finalized_sessions(max_age: float | None = None, now: float | None = None) -> int:
    """Drop sessions finalized more than max_age seconds ago. Returns how many were dropped."""
    if max_age is None:
        max_age = get_settings().SESSION_RETENTION_SECONDS
    if max_age <= 0:
        return 0
    now = time.time() if now is None else now
    expired = [
        sid
        for sid, session in _session_store.items()
        if session["finalized_at"] is not None and now - session["finalized_at"] >= max_age
    ]
    for sid in expired:
        del _session_store[sid]
    if expired:
        logger.info("Evicted %d finalized session(s)", len(expired))
    return len(expired)


def create_session(config_overrides: dict[str, Any] | None = None, session_id: str | None = None) -> str:
    """Create a session with a fresh processor; returns its id."""
    evict_finalized_sessions()
    session_id = session_id or generate_session_id()
    config = default_config()
    if config_overrides:
        config = config.with_changes(**config_overrides)
    _session_store[session_id] = {
        "processor": SmartSegmentationProcessor(config),
        "created_at": time.time(),
        "finalized": False,
        "finalized_at": None,
    }
    return session_id


def get_session(session_id: str) -> dict[str, Any] | None:
    """Return session dict or None if not found."""
    return _session_store.get(session_id)


def get_processor(session_id: str) -> SmartSegmentationProcessor | None:
    session = _session_store.get(session_id)
    if session is None:
        return None
    return session["processor"]


def mark_finalized(session_id: str, finalized: bool = True) -> None:
    session = _session_store.get(session_id)
    if session is not None:
        session["finalized"] = finalized
        session["finalized_at"] = time.time() if finalized else None


def delete_session(session_id: str) -> bool:
    """Remove session from store. Return True if it existed."""
    if session_id in _session_store:
        del _session_store[session_id]
        return True
    return False


def session_store() -> dict[str, dict[str, Any]]:
    """Return the underlying store (read-only view for debugging)."""
    return _session_store
