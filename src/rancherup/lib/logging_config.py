"""Logging setup for rancher-service-up.

All modules obtain loggers through get_logger(); the command line calls
setup_logging() once before any Rancher API traffic.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "rancherup"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DEBUG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s (%(filename)s:%(lineno)d): %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty below WARNING
NOISY_LOGGERS = ("urllib3", "requests")


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the rancherup logger hierarchy.

    Args:
        verbose: Enable DEBUG level with file and line information
        quiet: Only emit errors
    """
    if verbose:
        level = logging.DEBUG
        fmt = DEBUG_FORMAT
    elif quiet:
        level = logging.ERROR
        fmt = DEFAULT_FORMAT
    else:
        level = logging.INFO
        fmt = DEFAULT_FORMAT

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
