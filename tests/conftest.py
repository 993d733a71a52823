import logging
from typing import List

import pytest
from fastapi.testclient import TestClient

from typedwire.config import Settings
from typedwire.main import create_app

# tests/conftest.py


@pytest.fixture
def anyio_backend():
    # Peer schedules handlers with asyncio directly
    return "asyncio"


@pytest.fixture(scope="session")
def settings() -> Settings:
    """Defaults, independent of the developer's environment."""
    return Settings()


@pytest.fixture(scope="session")
def app(settings):
    """FastAPI app instance with the calculator routes."""
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    """TestClient for the FastAPI app."""
    return TestClient(app)


class RecordingListener:
    """Peer listener that keeps every callback for later assertions."""

    def __init__(self):
        self.parse_errors: List[Exception] = []
        self.missing: List[str] = []

    def on_parse_error(self, error: Exception) -> None:
        self.parse_errors.append(error)

    def on_missing_handler(self, msg_type: str) -> None:
        self.missing.append(msg_type)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


class _ListHandler(logging.Handler):
    def __init__(self, records):
        super().__init__(level=logging.DEBUG)
        self.records = records

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def capture_log():
    """
    Collect records of a typedwire logger. Those loggers don't propagate to the
    root logger, so caplog can't see them.
    Usage: records = capture_log("typedwire.peer")
    """
    attached = []

    def _capture(name: str):
        records = []
        handler = _ListHandler(records)
        logger = logging.getLogger(name)
        logger.addHandler(handler)
        attached.append((logger, handler))
        return records

    yield _capture
    for logger, handler in attached:
        logger.removeHandler(handler)
