"""Tests for logging setup and the timing decorator."""
import logging
from logging.handlers import RotatingFileHandler

import pytest

from gh_switch.utils.logging_config import get_log_level, setup_logging, timed


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger("gh_switch")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


class TestLogLevel:

    def test_default_is_warning(self, monkeypatch):
        monkeypatch.delenv("GH_SWITCH_LOG_LEVEL", raising=False)
        assert get_log_level() == logging.WARNING

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("GH_SWITCH_LOG_LEVEL", "info")
        assert get_log_level() == logging.INFO

    def test_verbose_wins(self, monkeypatch):
        monkeypatch.setenv("GH_SWITCH_LOG_LEVEL", "ERROR")
        assert get_log_level(verbose=True) == logging.DEBUG


class TestSetupLogging:

    def test_file_handler_created(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GH_SWITCH_LOG_FILE", raising=False)
        log_file = tmp_path / "logs" / "gh-switch.log"

        setup_logging(log_file=log_file)
        logging.getLogger("gh_switch.test").debug("hello")

        handlers = logging.getLogger("gh_switch").handlers
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)
        for h in handlers:
            h.flush()
        assert "hello" in log_file.read_text()

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path):
        setup_logging(log_file=tmp_path / "a.log")
        setup_logging(log_file=tmp_path / "a.log")

        assert len(logging.getLogger("gh_switch").handlers) == 2

    def test_unwritable_log_dir_falls_back_to_console(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GH_SWITCH_LOG_FILE", raising=False)
        blocker = tmp_path / "file"
        blocker.write_text("")

        setup_logging(log_file=blocker / "gh-switch.log")

        handlers = logging.getLogger("gh_switch").handlers
        assert not any(isinstance(h, RotatingFileHandler) for h in handlers)


class TestTimed:

    def test_logs_and_returns(self, caplog):
        @timed("probe")
        def work(x):
            return x * 2

        with caplog.at_level(logging.DEBUG, logger="gh_switch.perf"):
            assert work(21) == 42

        assert "probe" in caplog.text
        assert "OK" in caplog.text

    def test_reraises(self, caplog):
        @timed("probe")
        def boom():
            raise ValueError("nope")

        with caplog.at_level(logging.DEBUG, logger="gh_switch.perf"):
            with pytest.raises(ValueError):
                boom()

        assert "FAIL: nope" in caplog.text
