"""Structured logging for the gateway.

Every event carries the service identity (name, version, environment) so
records from several gateway instances can be told apart once shipped.
Request-scoped fields (request_id, method, path) come from structlog
contextvars bound by RequestTracingMiddleware.

Production renders one JSON object per line; development renders a
colored console line.
"""

import logging
import sys
from typing import Iterable

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Chatty below WARNING: connection pools, font subsetting in PDF output
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "fontTools", "redis")


class ServiceContext:
    """Processor stamping the service identity onto every event."""

    def __init__(self, service: str, version: str, environment: str):
        self.fields = {"service": service, "version": version, "env": environment}

    def __call__(
        self, logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in self.fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def build_processors(
    environment: str, context: ServiceContext
) -> tuple[list[Processor], Processor]:
    """Return the shared processor chain and the final renderer."""
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        context,
    ]

    if environment.lower() == "production":
        shared.append(structlog.processors.format_exc_info)
        return shared, structlog.processors.JSONRenderer()
    return shared, structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    service: str = "content-gateway",
    version: str = "0.0.0",
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        environment: "production" selects JSON output
        service: Service name stamped on every event
        version: Service version stamped on every event
        quiet_loggers: Third-party loggers raised to WARNING
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    shared, renderer = build_processors(
        environment, ServiceContext(service, version, environment)
    )

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    # create_app may run more than once per process (tests, reload)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer=type(renderer).__name__,
    )
