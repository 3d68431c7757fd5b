"""Module for logging and retry utilities."""

import logging
import sys
import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

def setup_logging(level: str = "INFO", renderer: str = "json"):
    """Configure structured logging.

    Args:
        level: Logging level (INFO, DEBUG, etc.)
        renderer: "json" for machine-readable output, "console" for humans
    """
    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if renderer == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stderr keeps stdout free for the CLI summary
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level.upper()
    )

def get_logger(name: str):
    """Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)

def with_retry(func):
    """Decorator to retry a flaky outer call (uploads, remote reads).

    Args:
        func: Function to wrap

    Returns:
        Wrapped function with retry logic
    """
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True
    )
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)
    return wrapper
