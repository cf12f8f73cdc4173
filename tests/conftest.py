"""Pytest configuration and shared fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from docker import DockerClient

# Set test environment before importing config
os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("PULL_MISSING_IMAGES", "true")

from dockctl.services.container.engine import ContainerEngine, ExecOutput


def inspect_payload(status: str, name: str = "/web", running: bool = None) -> dict:
    """Build a minimal inspect response for a container in ``status``."""
    if running is None:
        running = status in ("running", "paused", "restarting")
    return {
        "Id": "abc123def4567890",
        "Name": name,
        "State": {"Status": status, "Running": running},
    }


@pytest.fixture
def mock_docker():
    """Mock Docker client exposing the low-level API client."""
    mock_client = MagicMock(spec=DockerClient)
    mock_client.api = MagicMock()
    return mock_client


@pytest.fixture
def mock_engine():
    """Container engine with every engine call mocked."""
    engine = MagicMock(spec=ContainerEngine)
    engine.ping = AsyncMock(return_value=True)
    engine.list_containers = AsyncMock(return_value=[])
    engine.create_container = AsyncMock(return_value="abc123def4567890")
    engine.start = AsyncMock()
    engine.inspect = AsyncMock(return_value=inspect_payload("running"))
    engine.exec_run = AsyncMock(return_value=ExecOutput(0, b"output\n"))
    engine.stop = AsyncMock()
    engine.unpause = AsyncMock()
    engine.remove = AsyncMock()
    engine.wait = AsyncMock(return_value={"StatusCode": 0, "Error": None})
    engine.logs = AsyncMock(return_value=b"hello\n")
    engine.image_exists = AsyncMock(return_value=True)
    engine.pull = AsyncMock()
    engine.ensure_image = AsyncMock()
    return engine


@pytest.fixture
def no_sleep():
    """Stand-in for asyncio.sleep that records intervals without waiting."""
    return AsyncMock()


@pytest.fixture
def make_inspect():
    """Factory for container inspect payloads."""
    return inspect_payload
