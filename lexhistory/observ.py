"""Structured observability system using structlog.

Provides:
- Context-aware structured logging
- Execution context tracking (which caller is touching the shared history)
- JSON output for production, pretty console for dev
- Performance timing utilities

Usage:
    from lexhistory.observ import get_logger

    logger = get_logger(__name__)
    logger.info("history_saved", entry_id="abc123", kind="dictionary")
"""

import sys
import inspect
import logging
from typing import Optional
from contextvars import ContextVar
from functools import wraps
from time import perf_counter

import structlog
from structlog.typing import EventDict, WrappedLogger

from lexhistory.config import get_settings


# Several independent callers (popup, options page, CLI...) may share one store
context_id_var: ContextVar[Optional[str]] = ContextVar("context_id", default=None)


# ═════════════════════════════════════════════════════════════════════════════
# Structlog Configuration
# ═════════════════════════════════════════════════════════════════════════════

def add_context_fields(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict
) -> EventDict:
    """Add context variables to every log entry."""
    context_id = context_id_var.get()
    if context_id:
        event_dict["context_id"] = context_id

    return event_dict


def configure_logging() -> None:
    """Configure structlog based on environment settings."""
    settings = get_settings()

    is_dev = settings.debug or settings.log_level.upper() == "DEBUG"

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper(), logging.INFO)
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_context_fields,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if is_dev:
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=True)
        ])
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Initialize on module import
configure_logging()


# ═════════════════════════════════════════════════════════════════════════════
# Logger Factory
# ═════════════════════════════════════════════════════════════════════════════

def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Bound logger with automatic context
    """
    return structlog.get_logger(name)


def set_context_id(context_id: str) -> None:
    """Tag subsequent log entries with the calling execution context."""
    context_id_var.set(context_id)


def clear_context() -> None:
    """Clear all context variables."""
    context_id_var.set(None)


# ═════════════════════════════════════════════════════════════════════════════
# Performance Timing
# ═════════════════════════════════════════════════════════════════════════════

def timed(logger: Optional[structlog.stdlib.BoundLogger] = None):
    """Decorator to log function execution time.

    Example:
        @timed(logger)
        async def search(self, query: str) -> list[HistoryEntry]:
            ...
    """
    def decorator(func):
        nonlocal logger
        if logger is None:
            logger = get_logger(func.__module__)

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "function_failed",
                    function=func.__qualname__,
                    duration_ms=round((perf_counter() - start) * 1000, 2),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            logger.debug(
                "function_completed",
                function=func.__qualname__,
                duration_ms=round((perf_counter() - start) * 1000, 2),
            )
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "function_failed",
                    function=func.__qualname__,
                    duration_ms=round((perf_counter() - start) * 1000, 2),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise
            logger.debug(
                "function_completed",
                function=func.__qualname__,
                duration_ms=round((perf_counter() - start) * 1000, 2),
            )
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


class timer:
    """Context manager for timing code blocks.

    Example:
        with timer(logger, "fuzzy_rank", candidates=len(entries)):
            ranked = rank(entries)
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context
    ):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = perf_counter() - self.start_time
        if exc_type is None:
            self.logger.debug(
                f"{self.operation}_completed",
                duration_ms=round(duration * 1000, 2),
                **self.context
            )
        else:
            self.logger.error(
                f"{self.operation}_failed",
                duration_ms=round(duration * 1000, 2),
                error=str(exc_val),
                error_type=exc_type.__name__,
                **self.context
            )
        return False  # Don't suppress exceptions
