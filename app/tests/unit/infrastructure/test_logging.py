"""Unit tests for logging setup and context binding."""

import logging
import sys
from unittest.mock import patch

import pytest
import structlog

from infrastructure.logging import (
    bind_log_context,
    clear_log_context,
    configure_logging,
    get_module_logger,
)
from infrastructure.logging.setup import _is_test_environment


@pytest.mark.unit
class TestLoggingConfiguration:
    def test_is_test_environment_detects_pytest(self):
        assert _is_test_environment() is True

    def test_is_test_environment_without_pytest(self):
        with patch.dict(sys.modules):
            del sys.modules["pytest"]
            assert _is_test_environment() is False

    def test_configure_logging_suppresses_output_under_pytest(self):
        configure_logging()
        assert logging.root.level == logging.CRITICAL + 1

    def test_configure_logging_returns_logger(self):
        logger = configure_logging(log_level="DEBUG", is_production=True)
        assert hasattr(logger, "bind")

    def test_get_module_logger_binds_component(self):
        logger = get_module_logger()
        assert hasattr(logger, "info")


@pytest.mark.unit
class TestLogContext:
    def teardown_method(self):
        clear_log_context()

    def test_bind_log_context_binds_and_unbinds(self):
        with bind_log_context(refresh_generation=3):
            assert structlog.contextvars.get_contextvars() == {"refresh_generation": 3}
        assert structlog.contextvars.get_contextvars() == {}

    def test_bind_log_context_skips_none(self):
        with bind_log_context(refresh_generation=1, trigger=None):
            assert "trigger" not in structlog.contextvars.get_contextvars()

    def test_bind_log_context_unbinds_on_error(self):
        with pytest.raises(ValueError):
            with bind_log_context(refresh_generation=2):
                raise ValueError("boom")
        assert structlog.contextvars.get_contextvars() == {}

    def test_clear_log_context(self):
        structlog.contextvars.bind_contextvars(stale="value")
        clear_log_context()
        assert structlog.contextvars.get_contextvars() == {}
