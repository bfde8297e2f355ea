"""Tests for logging configuration."""

import structlog

from chartstore.logging import get_logger, operation_context, setup_logging
from chartstore.settings import Settings


def test_operation_context_binds_and_clears() -> None:
    with operation_context("install_app", app_name="redis"):
        bound = structlog.contextvars.get_contextvars()
        assert bound["operation"] == "install_app"
        assert bound["app_name"] == "redis"

    assert "operation" not in structlog.contextvars.get_contextvars()


def test_setup_logging_accepts_explicit_settings() -> None:
    settings = Settings(_env_file=None, observability={"log_format": "text", "log_level": "DEBUG"})

    setup_logging(settings)

    assert get_logger("chartstore.test") is not None
    assert structlog.is_configured()
