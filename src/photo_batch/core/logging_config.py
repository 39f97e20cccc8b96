"""Centralized logging configuration for the photo batch pipeline."""

import os
import sys
import logging
from typing import Optional

PACKAGE_LOGGER = "photo-batch"


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric level from an explicit name, else LOG_LEVEL, else INFO."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level_value = getattr(logging, name, logging.INFO)
    return level_value if isinstance(level_value, int) else logging.INFO


def debug_level_name(debug: bool) -> Optional[str]:
    """Level override for a job: DEBUG when asked for, otherwise the environment's."""
    return "DEBUG" if debug else None


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "photo-batch")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()
        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Get a logger configured the same way as every other pipeline logger."""
    return setup_logger(name)


def package_loggers():
    """Loggers already created under the ``photo-batch`` namespace."""
    prefix = PACKAGE_LOGGER + "."
    for name, candidate in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(candidate, logging.Logger) and (
            name == PACKAGE_LOGGER or name.startswith(prefix)
        ):
            yield candidate


def set_debug_logging(logger: logging.Logger) -> None:
    """
    Switch a logger, the root logger and every existing pipeline logger to DEBUG.

    Pipeline loggers do not propagate, so lowering the root level alone does
    not reach them. Loggers configured later take their level from
    ``setup_logger`` and need ``debug_level_name`` passed in explicitly.
    """
    logger.setLevel(logging.DEBUG)
    logging.getLogger().setLevel(logging.DEBUG)
    for pipeline_logger in package_loggers():
        pipeline_logger.setLevel(logging.DEBUG)
