"""Logging configuration for netcheck."""

import logging
import os
import sys

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Library loggers held at WARNING or above
QUIET_LOGGERS = ("urllib3", "requests", "dns")


def configure_logging() -> int:
    """Configure application-wide logging.

    Reads NETCHECK_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL;
    default INFO, unknown values fall back to INFO). Logs go to stderr so
    the report on stdout stays clean.

    Examples:
        $ NETCHECK_LOG_LEVEL=DEBUG python -m netcheck
        $ NETCHECK_LOG_LEVEL=WARNING python -m netcheck > report.txt

    Returns:
        The logging level that was applied
    """
    log_level_str = os.environ.get("NETCHECK_LOG_LEVEL", "INFO").strip().upper()
    log_level = LOG_LEVELS.get(log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.getLogger(__name__).debug("Logging configured: level=%s", logging.getLevelName(log_level))
    return log_level
