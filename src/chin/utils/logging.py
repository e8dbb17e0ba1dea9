"""
structlog setup for the ``chin`` command.

Modules create their loggers at import time with :func:`get_logger`. Those
loggers stay lazy until first use, so a later :func:`configure_logging` call
still decides their level, renderer and stream.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional, cast

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import BoundLogger
from structlog.types import Processor

from chin import __version__

SERVICE_NAME = "chin"
# every chin logger lives below this stdlib logger
PACKAGE_LOGGER = "chin"


def _coerce_level(level: str | int) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, str):
            raise ValueError(f"Invalid log level: {level}")
        return int(resolved)
    return int(level)


def _renderer(json_output: bool, stream: IO[str]) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    isatty = getattr(stream, "isatty", None)
    return ConsoleRenderer(colors=bool(isatty and isatty()))


def configure_logging(
    level: str | int = "INFO",
    json_output: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route chin's log events to ``stream`` (stderr when omitted).

    Only the ``chin`` logger tree is touched; it gets a single handler and
    stops propagating, so repeated calls replace the previous setup instead
    of stacking handlers.
    """
    stream = stream or sys.stderr
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(json_output, stream),
            foreign_pre_chain=shared_processors,
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(_coerce_level(level))
    package_logger.propagate = False


def get_logger(name: str) -> BoundLogger:
    """Lazy structlog logger carrying the service name and version."""
    return cast(
        BoundLogger,
        structlog.get_logger(name, service_name=SERVICE_NAME, version=__version__),
    )


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Bind operation context (operation, archive, ...) for the duration of a block."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
