"""
Structured logging for chartstore.

structlog on top of stdlib logging. Orchestrations wrap their work in
``operation_context`` so every event logged beneath them (repositories,
registrar, engines) carries the operation name and the app being handled.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from chartstore.settings import Settings, get_settings


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        settings: Settings to read observability options from, defaults to the global ones
    """
    observability = (settings or get_settings()).observability
    logging.basicConfig(format="%(message)s", level=observability.log_level.value)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if observability.enable_correlation_ids:
        processors.insert(
            0,
            structlog.processors.CallsiteParameterAdder(
                parameters=[structlog.processors.CallsiteParameter.THREAD_NAME]
            ),
        )

    if observability.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def operation_context(operation: str, **values: Any) -> Iterator[None]:
    """Bind ``operation`` and ``values`` to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(operation=operation, **values):
        yield


# Initialize on import
setup_logging()
