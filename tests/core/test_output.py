"""Tests for logging setup and the CLI log helper."""

import pytest
from loguru import logger

from playhead.core.config import LoggingConfig
from playhead.core.output import log, setup_from_config


@pytest.fixture
def restore_logger():
    yield
    logger.remove()


class TestSetup:
    def test_setup_from_config_writes_to_file(self, tmp_path, restore_logger):
        log_file = tmp_path / "logs" / "playhead.log"
        setup_from_config(LoggingConfig(level="DEBUG", log_file=str(log_file)))

        logger.debug("hello from the test")
        logger.complete()

        assert "hello from the test" in log_file.read_text(encoding="utf-8")

    def test_level_filters_messages(self, tmp_path, restore_logger):
        log_file = tmp_path / "playhead.log"
        setup_from_config(LoggingConfig(level="WARNING", log_file=str(log_file)))

        logger.info("quiet")
        logger.warning("loud")

        content = log_file.read_text(encoding="utf-8")
        assert "loud" in content
        assert "quiet" not in content


class TestLog:
    def test_info_goes_to_stdout(self, capsys):
        log("Nothing to continue.")
        captured = capsys.readouterr()
        assert "Nothing to continue." in captured.out

    def test_warning_goes_to_stderr(self, capsys):
        log("careful", "warning")
        captured = capsys.readouterr()
        assert "careful" in captured.err

    def test_debug_is_not_printed(self, capsys):
        log("internal", "debug")
        assert capsys.readouterr().out == ""

    def test_error_goes_to_stderr(self, capsys):
        log("could not save", "error")
        captured = capsys.readouterr()
        assert "could not save" in captured.err
        assert captured.out == ""

    def test_brackets_are_printed_literally(self, capsys):
        log("Saved [player-storage] to disk")
        assert "Saved [player-storage] to disk" in capsys.readouterr().out
