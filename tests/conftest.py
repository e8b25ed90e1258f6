"""Shared fixtures for Playhead tests."""

import pytest

from playhead.domain.library.models import Track


def _make_track(track_id: str, **overrides) -> Track:
    fields = {
        "title": f"Track {track_id}",
        "file_url": f"https://media.example/{track_id}.mp3",
        "artist": "Test Artist",
    }
    fields.update(overrides)
    return Track(id=track_id, **fields)


@pytest.fixture
def make_track():
    """Factory for Tracks with predictable defaults."""
    return _make_track


@pytest.fixture
def tracks() -> list[Track]:
    """Three-track queue: A, B, C."""
    return [_make_track("A"), _make_track("B"), _make_track("C")]


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config and data files out of the real home directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("PLAYHEAD_DATA_DIR", raising=False)
    monkeypatch.delenv("PLAYHEAD_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PLAYHEAD_ALLOWED_ORIGINS", raising=False)


@pytest.fixture
def data_dir(tmp_path):
    """Directory for persisted records."""
    path = tmp_path / "store"
    path.mkdir()
    return path
