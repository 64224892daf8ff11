"""
Unit tests for environment configuration and structured JSON logging.
"""

import importlib
import json
import logging

import pytest

from tokenvest.core import config
from tokenvest.core.contract_exceptions import ConfigurationError
from tokenvest.core.logging_config import CustomJsonFormatter, get_logger, setup_logging


class TestConfig:

    def test_int_env_default(self, monkeypatch):
        monkeypatch.delenv("TOKENVEST_TEST_INT", raising=False)
        assert config.get_int_env("TOKENVEST_TEST_INT", 7) == 7

    def test_int_env_parsed(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_TEST_INT", " 12 ")
        assert config.get_int_env("TOKENVEST_TEST_INT", 7) == 12

    def test_int_env_invalid(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_TEST_INT", "twelve")
        with pytest.raises(ConfigurationError) as exc_info:
            config.get_int_env("TOKENVEST_TEST_INT", 7)
        assert exc_info.value.details["env_var"] == "TOKENVEST_TEST_INT"

    def test_int_env_below_minimum(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_TEST_INT", "0")
        with pytest.raises(ConfigurationError):
            config.get_int_env("TOKENVEST_TEST_INT", 7, minimum=1)

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_TEST_LEVEL", "debug")
        assert config.get_log_level_env("TOKENVEST_TEST_LEVEL") == "DEBUG"

    def test_log_level_invalid(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_TEST_LEVEL", "loud")
        with pytest.raises(ConfigurationError):
            config.get_log_level_env("TOKENVEST_TEST_LEVEL")

    def test_module_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TOKENVEST_MAX_BALLOT_OPTIONS", "3")
        monkeypatch.setenv("TOKENVEST_ENVIRONMENT", "staging")
        try:
            reloaded = importlib.reload(config)
            assert reloaded.MAX_BALLOT_OPTIONS == 3
            assert reloaded.ENVIRONMENT == "staging"
        finally:
            monkeypatch.undo()
            importlib.reload(config)

    def test_poll_uses_configured_max_options(self, monkeypatch):
        from tokenvest.governance.poll import Poll

        monkeypatch.setattr(config, "MAX_BALLOT_OPTIONS", 2)
        assert Poll().max_options == 2


class TestLogging:

    def _format(self, formatter, **extra):
        record = logging.LogRecord(
            name="tokenvest.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="Schedule created",
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return json.loads(formatter.format(record))

    def test_formatter_emits_json_with_context(self):
        formatter = CustomJsonFormatter(environment="test", service_name="tokenvest")
        payload = self._format(formatter, event="vesting.created", total=100)

        assert payload["message"] == "Schedule created"
        assert payload["level"] == "info"
        assert payload["environment"] == "test"
        assert payload["service"] == "tokenvest"
        assert payload["event"] == "vesting.created"
        assert payload["total"] == 100
        assert payload["timestamp"].endswith("Z")
        assert payload["source"]["line"] == 10

    def test_timestamp_is_utc_with_z_suffix(self):
        formatter = CustomJsonFormatter(environment="test")
        record = logging.LogRecord("tokenvest.test", logging.INFO, __file__, 1, "tick", (), None)
        record.created = 0.0
        payload = json.loads(formatter.format(record))
        assert payload["timestamp"] == "1970-01-01T00:00:00Z"

    def test_timestamp_can_be_disabled(self):
        formatter = CustomJsonFormatter(timestamp=False, environment="test")
        payload = self._format(formatter)
        assert not payload.get("timestamp")

    def test_setup_logging_writes_json_file(self, tmp_path):
        log_file = tmp_path / "logs" / "tokenvest.json"
        logger = setup_logging(
            name="tokenvest.test_file",
            log_file=str(log_file),
            level="DEBUG",
            environment="test",
            enable_console=False,
        )
        logger.info("hello", extra={"event": "test.hello"})
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text().strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "test.hello"
        assert payload["service"] == "tokenvest"
        assert logger.level == logging.DEBUG

        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_setup_logging_replaces_handlers(self):
        logger = setup_logging(name="tokenvest.test_replace", log_file="", level="INFO")
        logger = setup_logging(name="tokenvest.test_replace", log_file="", level="WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        logger.handlers.clear()

    def test_get_logger_configures_once(self):
        first = get_logger("tokenvest.test_once", log_file="")
        handler_count = len(first.handlers)
        second = get_logger("tokenvest.test_once", log_file="")
        assert first is second
        assert len(second.handlers) == handler_count == 1
        first.handlers.clear()
