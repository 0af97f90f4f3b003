"""Structured logging configuration using structlog.

Provides JSON output for production (parseable by ELK, Loki, CloudWatch)
and pretty console output for development.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import EventDict, WrappedLogger

from retry_engine.retry.exceptions import RetryConfigurationError

# Name of the root handler owned by configure_logging
HANDLER_NAME = "retry_engine"

# Levels structlog can map back to method names
_LEVELS: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_log_level(level: int | str) -> int:
    """Convert a level name or number to a stdlib level number.
    
    Args:
        level: Level number (e.g. logging.INFO) or name (e.g. "info")
    
    Returns:
        Standard logging level number
    
    Raises:
        RetryConfigurationError: If the level is not a standard level
    """
    if isinstance(level, int):
        if level not in _LEVELS.values():
            raise RetryConfigurationError(f"Unknown log level: {level}")
        return level

    try:
        return _LEVELS[level.upper()]
    except KeyError:
        raise RetryConfigurationError(f"Unknown log level: {level!r}") from None


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application context to all log events."""
    event_dict["app"] = "retry-engine"
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for structured logging.
    
    Meant for applications (and tests) embedding the retry engine; the
    library itself never calls it. Handlers installed by other code stay
    on the root logger: only the handler added by a previous call is
    replaced, so calling this twice does not duplicate output.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Environment name (development, production)
        stream: Output stream (defaults to sys.stdout)
    
    In production mode:
        - JSON output for machine parsing
        - ISO timestamps
        - Exception info included
        
    In development mode:
        - Pretty colored console output
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"
    
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]
    
    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    
    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )
    handler.setLevel(log_level_int)
    
    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)
    
    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
