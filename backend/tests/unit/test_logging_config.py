"""
Unit tests for logging configuration.
"""

import json
import logging
import logging.handlers

import pytest

from backend.src.utils.logging_config import (
    JSONFormatter,
    LogOptions,
    configure_logging,
    get_logger,
)


class TestGetLogger:

    def test_namespaced_logger(self):
        assert get_logger("services").name == "ewm.services"

    def test_unknown_logger(self):
        with pytest.raises(ValueError):
            get_logger("billing")


class TestJSONFormatter:

    def test_extra_fields_are_included(self):
        record = logging.LogRecord(
            "ewm.services", logging.INFO, __file__, 10, "Confirmed %s", ("request",), None
        )
        record.event_id = 12

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Confirmed request"
        assert data["level"] == "INFO"
        assert data["event_id"] == 12


class TestConfigureLogging:

    def test_production_writes_files(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EWM_ENV", "production")
        monkeypatch.setenv("EWM_LOG_DIR", str(tmp_path))

        loggers = configure_logging()
        try:
            assert isinstance(loggers["api"].handlers[0], logging.handlers.RotatingFileHandler)
        finally:
            for logger in loggers.values():
                for handler in logger.handlers:
                    handler.close()
            monkeypatch.delenv("EWM_ENV")
            configure_logging()

    def test_reconfigure_does_not_duplicate_handlers(self, tmp_path):
        options = LogOptions(level=logging.DEBUG, production=False, log_dir=tmp_path)

        configure_logging(options)
        loggers = configure_logging(options)

        assert len(loggers["stats"].handlers) == 1
        assert loggers["stats"].level == logging.DEBUG


class TestLogOptions:

    def test_defaults(self, monkeypatch):
        for name in ("EWM_LOG_LEVEL", "EWM_ENV", "EWM_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)

        options = LogOptions.from_env()

        assert options.level == logging.INFO
        assert options.production is False

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("EWM_LOG_LEVEL", "warning")
        assert LogOptions.from_env().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("EWM_LOG_LEVEL", "chatty")
        assert LogOptions.from_env().level == logging.INFO
