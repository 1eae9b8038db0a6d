"""Logging setup for the application."""

import logging
import sys


def setup_logger(log_level: str = "INFO", name: str = "lazy_devops") -> logging.Logger:
    """
    Set up and configure application logger.

    What each level shows for a run:
    - ERROR: fatal failures of the pull request list call
    - WARNING: the permissive re-fetch after a strict decode failure, and
      pull requests whose checks could not be fetched
    - INFO: list requests and result counts
    - DEBUG: per-PR status counts and auth failures on status calls

    Everything goes to stderr so the table on stdout stays clean, and the
    level applies to the module loggers (fetchers.*, summary.*, display.*)
    as well as the named application logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger name (default: lazy_devops)

    Returns:
        logging.Logger: Configured logger instance
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    return logger
