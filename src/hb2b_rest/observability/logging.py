"""structlog setup for deliveries and submissions.

Events are rendered by a single stdout handler on the root logger, so
records from the standard library (httpx among them) share the format.
The format, level and service name come from arguments or, when omitted,
from the environment:

    HB2B_LOG_FORMAT: "json" or "console" (default)
    HB2B_LOG_LEVEL: DEBUG, INFO (default), WARNING, ERROR or CRITICAL
    HB2B_SERVICE_NAME: value of the "service" field (default "hb2b-rest-backend")

Example:
    >>> configure_logging(log_format="json")
    >>> with log_context(message_id="msg-1"):
    ...     get_logger(__name__).info("hb2b.delivery.sending")
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import Processor

ENV_LOG_FORMAT = "HB2B_LOG_FORMAT"
ENV_LOG_LEVEL = "HB2B_LOG_LEVEL"
ENV_SERVICE_NAME = "HB2B_SERVICE_NAME"

_DEFAULTS = {
    ENV_LOG_FORMAT: "console",
    ENV_LOG_LEVEL: "INFO",
    ENV_SERVICE_NAME: "hb2b-rest-backend",
}

_configured = False


def _from_env(name: str) -> str:
    return os.environ.get(name) or _DEFAULTS[name]


def _pre_chain() -> list[Processor]:
    """Processors applied to structlog events and stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Only the first call takes effect unless force is set.

    Args:
        log_format: "json" or "console"
        log_level: Name of the minimum level
        service_name: Value bound to the "service" field of every event
        force: Replace an earlier configuration
    """
    global _configured
    if _configured and not force:
        return

    level_name = (log_level or _from_env(ENV_LOG_LEVEL)).upper()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format or _from_env(ENV_LOG_FORMAT)),
            ],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelName(level_name))

    structlog.contextvars.bind_contextvars(service=service_name or _from_env(ENV_SERVICE_NAME))
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger for the named module, configuring logging on first use."""
    if not _configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Add fields to every event logged inside the block, in any module.

    Fields bound before the block are restored when it exits.

    Example:
        >>> with log_context(message_id="msg-1", message_unit="Receipt"):
        ...     get_logger("hb2b_rest.transport").info("hb2b.delivery.sending")
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
