"""Tests for structured logging configuration."""

import json
import logging
from io import StringIO
from unittest.mock import patch

import structlog

from src.core.logging import (
    QUIET_LOGGERS,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
    redact_credentials,
    unbind_contextvars,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def setup_method(self) -> None:
        """Reset structlog and logging configuration before each test."""
        structlog.reset_defaults()
        clear_contextvars()

    def test_configure_development_mode(self) -> None:
        """Should configure pretty-printed output in development mode."""
        configure_logging(development=True)
        get_logger("test").info("banner_loaded", slides=3)

    def test_configure_production_mode(self) -> None:
        """Should configure JSON output in production mode."""
        configure_logging(development=False)
        get_logger("test").info("banner_loaded", slides=3)

    def test_reads_environment_variable(self) -> None:
        """ENVIRONMENT=production selects the JSON renderer."""
        with patch.dict("os.environ", {"ENVIRONMENT": "production"}):
            configure_logging()
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_uses_console_renderer(self) -> None:
        configure_logging(development=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_reads_log_level_environment_variable(self) -> None:
        """Should read LOG_LEVEL env var."""
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}):
            configure_logging(development=True)
            assert logging.getLogger().level == logging.DEBUG

    def test_default_log_level_is_info(self) -> None:
        """Should default to INFO log level."""
        with patch.dict("os.environ", {}, clear=True):
            configure_logging(development=True)
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(development=True, log_level="LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_silences_sdk_loggers(self) -> None:
        """Should set SDK loggers to WARNING level."""
        configure_logging(development=True, log_level="DEBUG")
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        assert "google" in QUIET_LOGGERS
        assert "aiohttp" in QUIET_LOGGERS


class TestGetLogger:
    """Tests for get_logger function."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        configure_logging(development=True)

    def test_returns_bound_logger(self) -> None:
        logger = get_logger("test.module")
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "error")

    def test_logger_without_name(self) -> None:
        get_logger().info("no_name")


class TestContextVars:
    """Tests for context variable functions."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        clear_contextvars()
        configure_logging(development=True)

    def teardown_method(self) -> None:
        clear_contextvars()

    def test_bind_contextvars_adds_to_context(self) -> None:
        bind_contextvars(user_id="u1", list_name="favorites")
        context = structlog.contextvars.get_contextvars()
        assert context["user_id"] == "u1"
        assert context["list_name"] == "favorites"

    def test_clear_contextvars_removes_all(self) -> None:
        bind_contextvars(key1="value1", key2="value2")
        clear_contextvars()
        assert structlog.contextvars.get_contextvars() == {}

    def test_unbind_contextvars_removes_specific(self) -> None:
        bind_contextvars(keep="this", remove="that")
        unbind_contextvars("remove")
        assert structlog.contextvars.get_contextvars() == {"keep": "this"}


class TestProductionJsonOutput:
    """Tests for JSON output in production mode."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        clear_contextvars()

    def teardown_method(self) -> None:
        clear_contextvars()

    def test_json_output_includes_bound_context(self) -> None:
        """Each line is a JSON object carrying the event and bound context."""
        output = StringIO()
        handler = logging.StreamHandler(output)
        handler.setLevel(logging.INFO)

        configure_logging(development=False, log_level="INFO")
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)

        try:
            bind_contextvars(user_id="u1")
            get_logger("test").info("library_entry_added", media_id=603)
            handler.flush()
            lines = [line for line in output.getvalue().splitlines() if line]
            parsed = json.loads(lines[-1])
            assert parsed["event"] == "library_entry_added"
            assert parsed["media_id"] == 603
            assert parsed["user_id"] == "u1"
            assert parsed["level"] == "info"
            assert "timestamp" in parsed
        finally:
            root_logger.removeHandler(handler)


class TestRedactCredentials:
    """Credential fields are masked before rendering."""

    def test_masks_token_fields(self) -> None:
        event = {"event": "catalog_request", "headers": {"Authorization": "Bearer abc"}, "token": "abc"}
        redacted = redact_credentials(None, "debug", event)
        assert redacted == {"event": "catalog_request", "headers": "***", "token": "***"}

    def test_leaves_other_fields(self) -> None:
        event = {"event": "library_entry_added", "user_id": "u1", "media_id": 603}
        assert redact_credentials(None, "info", dict(event)) == event

    def test_json_output_never_contains_token(self) -> None:
        structlog.reset_defaults()
        output = StringIO()
        handler = logging.StreamHandler(output)
        configure_logging(development=False, log_level="DEBUG")
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)

        try:
            get_logger("test").debug("catalog_request", access_token="secret-token", path="/movie/popular")
            handler.flush()
            parsed = json.loads(output.getvalue().splitlines()[-1])
            assert parsed["access_token"] == "***"
            assert parsed["path"] == "/movie/popular"
            assert "secret-token" not in output.getvalue()
        finally:
            root_logger.removeHandler(handler)
