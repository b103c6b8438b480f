"""Unit tests for settings and logging configuration."""

import logging

import structlog

from entval import validate
from entval.core import (
    ValidationOperationLogger,
    ValidatorSettings,
    bind_context,
    clear_context,
    configure_library_logging,
    configure_logging,
    get_logger,
)
from entval.core.logging import add_app_context, add_correlation_id


class TestValidatorSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("ENTVAL_ENVIRONMENT", "ENTVAL_LOG_LEVEL", "ENTVAL_EXPLICIT_ONLY"):
            monkeypatch.delenv(name, raising=False)

        settings = ValidatorSettings()

        assert settings.environment == "development"
        assert settings.log_level == "WARNING"
        assert settings.explicit_only is True
        assert settings.is_development is True
        assert settings.is_production is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ENTVAL_ENVIRONMENT", "production")
        monkeypatch.setenv("ENTVAL_EXPLICIT_ONLY", "false")
        monkeypatch.setenv("ENTVAL_SCHEMA_DIR", "/etc/entval/schemas")

        settings = ValidatorSettings()

        assert settings.is_production is True
        assert settings.explicit_only is False
        assert settings.schema_dir == "/etc/entval/schemas"


class TestLogging:
    """Test the structlog helpers."""

    def test_app_context_processor(self):
        event = add_app_context(None, "info", {"event": "x", "logger": "entval.engine"})

        assert event["service"] == "entval"
        assert event["component"] == "entval.engine"

    def test_correlation_id_processor(self):
        bind_context(correlation_id="abc-123")
        try:
            event = add_correlation_id(None, "info", {"event": "x"})
        finally:
            clear_context()

        assert event["correlation_id"] == "abc-123"
        assert "correlation_id" not in add_correlation_id(None, "info", {})

    def test_bind_and_clear_context(self):
        bind_context(entity_kind="User")
        assert structlog.contextvars.get_contextvars()["entity_kind"] == "User"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_configure_logging(self):
        configure_logging(environment="testing", log_level="DEBUG", json_logs=True)

        assert get_logger("entval.test") is not None

    def test_operation_logger_measures_time(self):
        configure_logging(log_level="WARNING")

        with ValidationOperationLogger(get_logger("entval.test"), "op") as operation:
            assert operation.elapsed_ms >= 0

        assert operation.start_time is not None


class TestLibraryLogging:
    """Test that importing entval as a library stays silent."""

    def test_entval_logger_has_null_handler(self):
        handlers = logging.getLogger("entval").handlers

        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_validation_prints_nothing_by_default(self, capsys):
        structlog.reset_defaults()
        configure_library_logging()

        validate({"name": 1}, {"name": {"type": "string"}}, "User")
        get_logger("entval.test").debug("not shown", detail=1)

        assert capsys.readouterr().out == ""

    def test_library_config_uses_stdlib_loggers(self):
        structlog.reset_defaults()
        configure_library_logging()

        assert structlog.is_configured()
        assert isinstance(
            structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory
        )
