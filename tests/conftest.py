from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from interview_stream.main import app
from interview_stream.segmentation.models import SegmentationConfig
from interview_stream.segmentation.processor import SmartSegmentationProcessor
from interview_stream.session_store import session_store


@pytest.fixture()
def config() -> SegmentationConfig:
    return SegmentationConfig()


@pytest.fixture()
def processor(config: SegmentationConfig) -> SmartSegmentationProcessor:
    return SmartSegmentationProcessor(config)


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch) -> None:
    # Keep tests independent of a developer's .env
    monkeypatch.setenv("UPDATE_FILTER_ENABLED", "true")
    monkeypatch.setenv("LOG_FILE", "")


@pytest.fixture()
def client():
    session_store().clear()
    with TestClient(app) as c:
        yield c
    session_store().clear()
