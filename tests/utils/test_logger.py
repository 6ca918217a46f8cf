"""Tests for logger utility."""

import logging
from logging.handlers import RotatingFileHandler
from types import SimpleNamespace

from ragchat.utils import logger as logger_module
from ragchat.utils.logger import setup_logger, get_app_logger, init_app_logger


class TestSetupLogger:
    """SUT: setup_logger"""

    def test_returns_logger(self):
        """Should return a Logger instance."""
        logger = setup_logger("test_logger_returns")
        assert isinstance(logger, logging.Logger)

    def test_with_level(self):
        """Setting DEBUG level should take effect."""
        logger = setup_logger("test_logger_level", log_level="DEBUG")
        assert logger.level == logging.DEBUG

    def test_no_duplicate_handlers(self):
        """Calling multiple times should not add duplicate handlers."""
        name = "test_logger_dup"
        logger1 = setup_logger(name)
        handler_count = len(logger1.handlers)
        logger2 = setup_logger(name)
        assert len(logger2.handlers) == handler_count
        assert logger1 is logger2

    def test_file_handler(self, tmp_path):
        """A log file path should create its directory and a rotating file handler."""
        log_file = tmp_path / "logs" / "app.log"
        logger = setup_logger("test_logger_file", log_file=str(log_file), max_bytes=1024, backup_count=2)
        assert log_file.parent.is_dir()
        handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(handlers) == 1
        assert handlers[0].maxBytes == 1024
        assert handlers[0].backupCount == 2

    def test_does_not_propagate(self):
        logger = setup_logger("test_logger_propagate")
        assert logger.propagate is False

    def test_format_has_source_location(self):
        logger = setup_logger("test_logger_format")
        record = logger.makeRecord("test_logger_format", logging.INFO, "service.py", 12, "hello", None, None)
        formatted = logger.handlers[0].formatter.format(record)
        assert "[service:12] hello" in formatted


class TestInitAppLogger:
    """SUT: init_app_logger"""

    @staticmethod
    def _settings(tmp_path, debug=False):
        return SimpleNamespace(
            log_level="WARNING",
            log_file=str(tmp_path / "ragchat.log"),
            log_max_bytes=1024,
            log_backup_count=1,
            debug=debug
        )

    def test_sets_app_logger(self, monkeypatch, tmp_path):
        monkeypatch.setattr(logger_module, "app_logger", None)

        logger = init_app_logger(self._settings(tmp_path))

        assert get_app_logger() is logger

    def test_quiets_http_client_logs(self, monkeypatch, tmp_path):
        monkeypatch.setattr(logger_module, "app_logger", None)
        httpx_logger = logging.getLogger("httpx")
        monkeypatch.setattr(httpx_logger, "level", logging.NOTSET)

        init_app_logger(self._settings(tmp_path))

        assert httpx_logger.level == logging.WARNING

    def test_debug_keeps_http_client_logs(self, monkeypatch, tmp_path):
        monkeypatch.setattr(logger_module, "app_logger", None)
        httpx_logger = logging.getLogger("httpx")
        monkeypatch.setattr(httpx_logger, "level", logging.NOTSET)

        init_app_logger(self._settings(tmp_path, debug=True))

        assert httpx_logger.level == logging.NOTSET


class TestGetAppLogger:
    """SUT: get_app_logger"""

    def test_default(self):
        """Should return a logger even when not explicitly initialized."""
        logger = get_app_logger()
        assert isinstance(logger, logging.Logger)
