"""Tests for the playhead command line."""

from unittest.mock import patch

import pytest

from playhead import cli
from playhead.core.config import Config, get_config_dir
from playhead.service import PlayerService


@pytest.fixture(autouse=True)
def no_log_setup():
    with patch("playhead.cli.setup_from_config"):
        yield


@pytest.fixture
def played(tracks):
    """Persist a short listening session in the default data directory."""
    service = PlayerService(Config())
    service.store.play_track(tracks[0], tracks)
    service.store.report_progress(30.0, duration=120.0)
    service.store.play_next()
    service.shutdown()
    return service


class TestFormatTime:
    @pytest.mark.parametrize(
        "seconds,expected",
        [(None, "0:00"), (-3, "0:00"), (5, "0:05"), (75.9, "1:15"), (3725, "1:02:05")],
    )
    def test_format_time(self, seconds, expected):
        assert cli.format_time(seconds) == expected


class TestCommands:
    """Test each subcommand end to end."""

    def test_history_empty(self, capsys):
        assert cli.main(["history"]) == 0
        assert "No playback history yet." in capsys.readouterr().out

    def test_history_lists_tracks(self, played, capsys):
        assert cli.main(["history", "--limit", "5"]) == 0
        out = capsys.readouterr().out
        assert "Track A" in out
        assert "Track B" in out

    def test_resume_lists_partial_tracks(self, played, capsys):
        assert cli.main(["resume"]) == 0
        out = capsys.readouterr().out
        assert "Track A" in out
        assert "25%" in out

    def test_resume_empty(self, capsys):
        assert cli.main(["resume"]) == 0
        assert "Nothing to continue." in capsys.readouterr().out

    def test_stats(self, played, capsys):
        assert cli.main(["stats", "--days", "3"]) == 0
        out = capsys.readouterr().out
        assert "Plays:" in out
        assert "Top tracks" in out

    def test_init_config_writes_file(self):
        assert cli.main(["init-config"]) == 0
        assert (get_config_dir() / "config.toml").exists()

    def test_init_config_refuses_to_overwrite(self, capsys):
        path = get_config_dir() / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text("# mine\n", encoding="utf-8")

        assert cli.main(["init-config"]) == 1
        assert path.read_text(encoding="utf-8") == "# mine\n"

        assert cli.main(["init-config", "--force"]) == 0
        assert "[player]" in path.read_text(encoding="utf-8")

    def test_serve_runs_uvicorn(self):
        with patch("uvicorn.run") as mock_run:
            assert cli.main(["serve", "--port", "9999"]) == 0
        args, kwargs = mock_run.call_args
        assert args[0] == "web.backend.main:app"
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9999

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit):
            cli.main([])
