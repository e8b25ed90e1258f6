"""Pytest configuration for backend tests.

Points config and data directories at a scratch location before the app is
imported, and swaps the process-wide player service for an in-memory one.
"""

import os
import random
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root to path so `web.backend` resolves
project_root = Path(__file__).parent.parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

_scratch = tempfile.mkdtemp(prefix="playhead-backend-tests-")
os.environ["XDG_CONFIG_HOME"] = os.path.join(_scratch, "config")
os.environ["XDG_DATA_HOME"] = os.path.join(_scratch, "data")
os.environ.pop("PLAYHEAD_DATA_DIR", None)
os.environ.pop("PLAYHEAD_ALLOWED_ORIGINS", None)

from fastapi.testclient import TestClient  # noqa: E402

from playhead.core.config import Config  # noqa: E402
from playhead.service import PlayerService  # noqa: E402
from web.backend.deps import get_player_service  # noqa: E402
from web.backend.main import app  # noqa: E402
from web.backend.sync_manager import sync_manager  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def service() -> PlayerService:
    return PlayerService(Config(), persist=False, rng=random.Random(0))


@pytest.fixture
def client(service):
    app.dependency_overrides[get_player_service] = lambda: service
    sync_manager.connections.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    sync_manager.connections.clear()


def _track_payload(track_id: str, **overrides) -> dict:
    payload = {
        "id": track_id,
        "title": f"Track {track_id}",
        "artist": "Test Artist",
        "type": "audio",
        "fileUrl": f"https://media.example/{track_id}.mp3",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def track_payload():
    """Factory for camelCase track payloads."""
    return _track_payload


@pytest.fixture
def queue_payload() -> list[dict]:
    return [_track_payload("A"), _track_payload("B"), _track_payload("C")]
