"""Structured logging configuration using structlog.

This module provides centralized logging configuration with JSON formatting.
Events logged inside ``run_context()`` carry the run_id of that training or
cross-validation run; events outside any run carry none.
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Iterator, Optional

import structlog
from structlog.types import EventDict, Processor

# Context variable for run_id (correlates events of one run)
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


@contextmanager
def run_context(run_id: Optional[str] = None) -> Iterator[str]:
    """Bind a run_id for the duration of a run.

    A run nested in another one (a fold trained during cross-validation)
    keeps the enclosing run_id. The previous value is restored on exit.

    Args:
        run_id: Explicit run_id (a fresh UUID if None and no run is active)

    Yields:
        The active run_id
    """
    run_id = run_id or run_id_var.get() or str(uuid.uuid4())
    token = run_id_var.set(run_id)
    try:
        yield run_id
    finally:
        run_id_var.reset(token)


def add_run_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add run_id to log event when a run is active."""
    run_id = run_id_var.get()
    if run_id is not None:
        event_dict["run_id"] = run_id
    return event_dict


def add_service_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add service_name to log event."""
    event_dict["service_name"] = "mlframe"
    return event_dict


def add_environment(
    environment: str,
) -> Processor:
    """Create a processor that adds environment to log events.

    Args:
        environment: Environment name (development, staging, production)

    Returns:
        Processor function
    """

    def _add_environment(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict["environment"] = environment
        return event_dict

    return _add_environment


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    environment: str = "production",
) -> None:
    """Configure structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ('json' or 'console')
        log_file: Optional log file path for file output
        environment: Environment name (development, staging, production)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Development reads better on a console, deployed environments want JSON
    if environment == "development" and log_format == "json":
        log_format = "console"
    elif environment in ("staging", "production") and log_format == "console":
        log_format = "json"

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        stream=sys.stdout,
        force=True,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_run_id,
        add_service_name,
        add_environment(environment),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.set_exc_info)
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))

        logging.getLogger().addHandler(file_handler)


def configure_logging_from_settings(settings: Optional[Any] = None) -> None:
    """Configure logging from the application settings.

    Args:
        settings: Settings instance (defaults to the global settings)
    """
    from mlframe.config.settings import get_settings

    settings = settings or get_settings()
    configure_logging(
        log_level=settings.log_level.value,
        log_format=settings.log_format.value,
        log_file=str(settings.log_file) if settings.log_file else None,
        environment=settings.environment.value,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
