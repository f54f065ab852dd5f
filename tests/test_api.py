from __future__ import annotations

import numpy as np


def _create(client, **config) -> str:
    res = client.post("/api/sessions", json={"config": config} if config else {})
    assert res.status_code == 200
    return res.json()["session_id"]


def test_health(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_session_update_flow(client) -> None:
    sid = _create(client)

    res = client.post(f"/api/sessions/{sid}/updates", json={"text": "I think", "translation": "我认为", "time": 0.0})
    assert res.status_code == 200
    body = res.json()
    assert body["new_segment"] is None
    assert body["buffer"]["text"] == "I think"

    res = client.post(
        f"/api/sessions/{sid}/updates",
        json={
            "text": "I think the main challenge was scalability.",
            "translation": "我认为主要挑战是可扩展性。",
            "time": 5.0,
            "silence": True,
            "speaker": "candidate",
        },
    )
    seg = res.json()["new_segment"]
    assert seg["source_text"] == "I think the main challenge was scalability."
    assert seg["word_count"] == 7
    assert seg["is_complete"] is True
    assert seg["speaker"] == "candidate"

    res = client.get(f"/api/sessions/{sid}/segments")
    assert [s["id"] for s in res.json()] == [seg["id"]]

    stats = client.get(f"/api/sessions/{sid}/stats").json()
    assert stats["total_segments"] == 1
    assert stats["completed_segments"] == 1


def test_finalize_and_clear(client) -> None:
    sid = _create(client)
    client.post(f"/api/sessions/{sid}/updates", json={"text": "and then", "time": 1.0})
    assert client.get(f"/api/sessions/{sid}/buffer").json()["text"] == "and then"

    res = client.post(f"/api/sessions/{sid}/finalize", json={"time": 2.0})
    assert res.status_code == 200
    assert res.json()["source_text"] == "and then"
    assert client.get(f"/api/sessions/{sid}").json()["finalized"] is True

    res = client.post(f"/api/sessions/{sid}/finalize", json={"time": 3.0})
    assert res.json() is None

    res = client.post(f"/api/sessions/{sid}/updates", json={"text": "late", "time": 4.0})
    assert res.status_code == 409

    assert client.delete(f"/api/sessions/{sid}/segments").json() == {"cleared": True}
    assert client.get(f"/api/sessions/{sid}/segments").json() == []
    res = client.post(f"/api/sessions/{sid}/updates", json={"text": "again", "time": 0.0})
    assert res.status_code == 200


def test_config_roundtrip(client) -> None:
    sid = _create(client, max_sentences_per_segment=3)
    config = client.get(f"/api/sessions/{sid}/config").json()
    assert config["max_sentences_per_segment"] == 3
    assert config["max_segment_duration"] == 60.0

    res = client.patch(f"/api/sessions/{sid}/config", json={"pause_threshold": 2.0, "sentence_end_markers": ["."]})
    assert res.status_code == 200
    assert res.json()["pause_threshold"] == 2.0
    assert res.json()["sentence_end_markers"] == ["."]
    assert res.json()["max_sentences_per_segment"] == 3


def test_config_rejects_unknown_and_invalid_fields(client) -> None:
    sid = _create(client)
    assert client.patch(f"/api/sessions/{sid}/config", json={"bogus": 1}).status_code == 422
    assert client.patch(f"/api/sessions/{sid}/config", json={"max_repetition_ratio": 2}).status_code == 422


def test_invalid_update_is_rejected(client) -> None:
    sid = _create(client)
    res = client.post(f"/api/sessions/{sid}/updates", json={"text": "hi", "time": 0.0, "confidence": 3})
    assert res.status_code == 422
    res = client.post(f"/api/sessions/{sid}/updates", json={"text": "hi", "time": 0.0, "speaker": "robot"})
    assert res.status_code == 422


def test_unknown_session_is_404(client) -> None:
    assert client.get("/api/sessions/nope/segments").status_code == 404
    assert client.delete("/api/sessions/nope").status_code == 404


def test_delete_session(client) -> None:
    sid = _create(client)
    assert client.delete(f"/api/sessions/{sid}").json() == {"deleted": True}
    assert client.get(f"/api/sessions/{sid}").status_code == 404


def test_quality_endpoint(client) -> None:
    res = client.post("/api/quality", json={"text": "We deployed it. Then the"})
    assert res.status_code == 200
    assert res.json()["completeness"] == 0.5
    assert res.json()["quality"] == "medium"


def test_websocket_stream(client) -> None:
    with client.websocket_connect("/ws/segments") as ws:
        hello = ws.receive_json()
        assert hello["type"] == "session"
        sid = hello["session_id"]

        ws.send_json({"type": "update", "text": "I think", "translation": "我认为", "time": 0.0})
        assert ws.receive_json()["type"] == "partial"

        ws.send_text("not json")
        assert ws.receive_json() == {"type": "error", "detail": "invalid frame"}

        ws.send_json(
            {
                "type": "update",
                "text": "I think the main challenge was scalability.",
                "translation": "我认为主要挑战是可扩展性。",
                "time": 5.0,
                "silence": True,
            }
        )
        final = ws.receive_json()
        assert final["type"] == "final"
        assert final["segment"]["source_text"] == "I think the main challenge was scalability."
        assert final["translation"] == "我认为主要挑战是可扩展性。"

        ws.send_json({"type": "update", "text": "Next question is about", "time": 6.0})
        assert ws.receive_json()["type"] == "partial"

        ws.send_json({"type": "stop", "time": 8.0})
        flushed = ws.receive_json()
        assert flushed["type"] == "final"
        assert flushed["is_final_segment"] is True
        assert flushed["segment"]["source_text"] == "Next question is about"
        assert ws.receive_json() == {"type": "stopped", "session_id": sid}

    segments = client.get(f"/api/sessions/{sid}/segments").json()
    assert len(segments) == 2
    assert client.get(f"/api/sessions/{sid}").json()["finalized"] is True


def test_websocket_uses_audio_silence_when_flag_omitted(client) -> None:
    silent_second = np.zeros(16000, dtype=np.int16).tobytes()
    with client.websocket_connect("/ws/segments") as ws:
        sid = ws.receive_json()["session_id"]
        ws.send_json({"type": "update", "text": "We rewrote the scheduler.", "time": 0.0})
        assert ws.receive_json()["type"] == "partial"

        ws.send_bytes(silent_second * 2)
        ws.send_json({"type": "update", "text": "We rewrote the scheduler.", "time": 6.0})
        final = ws.receive_json()
        assert final["type"] == "final"
        assert final["segment"]["end_time"] == 6.0

        ws.send_json({"type": "stop", "time": 7.0})
        assert ws.receive_json()["type"] == "stopped"

    assert len(client.get(f"/api/sessions/{sid}/segments").json()) == 1


def test_websocket_disconnect_flushes_pending_segment(client) -> None:
    with client.websocket_connect("/ws/segments") as ws:
        sid = ws.receive_json()["session_id"]
        ws.send_json({"type": "update", "text": "Unfinished thought about", "time": 2.0})
        assert ws.receive_json()["type"] == "partial"

    segments = client.get(f"/api/sessions/{sid}/segments").json()
    assert [s["source_text"] for s in segments] == ["Unfinished thought about"]


def test_websocket_update_without_time_is_rejected(client) -> None:
    with client.websocket_connect("/ws/segments") as ws:
        sid = ws.receive_json()["session_id"]
        ws.send_json({"type": "update", "text": "We sharded the database"})
        assert ws.receive_json() == {"type": "error", "detail": "invalid frame"}

        ws.send_json({"type": "update", "text": "We sharded the database", "time": 3.0})
        assert ws.receive_json()["type"] == "partial"

        # A stop frame may omit time and ends at the last update.
        ws.send_json({"type": "stop"})
        flushed = ws.receive_json()
        assert flushed["type"] == "final"
        assert flushed["segment"]["end_time"] == 3.0
        assert ws.receive_json() == {"type": "stopped", "session_id": sid}

    assert client.get(f"/api/sessions/{sid}/buffer").json()["text"] == ""
