"""Logging setup shared by the bundle API."""

import logging
import os
import sys

import structlog

DEFAULT_LOG_LEVEL = "INFO"


def get_log_level() -> int:
    """
    Resolve the log level from the ``LOG_LEVEL`` environment variable.

    :returns: A :mod:`logging` level number, ``INFO`` if unset.
    :raises RuntimeError: If ``LOG_LEVEL`` is not a recognised level name.
    """
    name = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelNamesMapping().get(name)
    if level is None:
        raise RuntimeError(f"LOG_LEVEL environment variable is invalid: {name!r}")
    return level


def configure_logging() -> None:
    """Route structlog events through stdlib logging as JSON lines."""
    level = get_log_level()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
