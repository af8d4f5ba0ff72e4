"""
Logging Configuration

Centralized logging set-up for the tracker. Library modules log through
``logging.getLogger(__name__)``; scripts call configure_logging() once.

The level defaults to INFO and can be overridden with the
ORBIT_TRACKER_LOG_LEVEL environment variable (e.g. DEBUG, WARNING).

Usage:
    from logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("ISS above horizon, azimuth 213.4")
    logger.warning("Element set is 9 days old")
"""

import logging
import os
import sys
from typing import Optional

# Default logging format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"

LEVEL_ENV_VAR = "ORBIT_TRACKER_LOG_LEVEL"


def resolve_level(level: Optional[int] = None) -> int:
    """
    Pick the effective logging level.

    Parameters
    ----------
    level : int, optional
        Explicit level; wins over the environment

    Returns
    -------
    int
        Level from ``level``, else ORBIT_TRACKER_LOG_LEVEL, else INFO
    """
    if level is not None:
        return level
    name = os.environ.get(LEVEL_ENV_VAR, "").strip().upper()
    value = logging.getLevelName(name) if name else logging.INFO
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """
    Install the tracker's handlers on the root logger.

    Any handlers already on the root logger are replaced, so calling this
    again (e.g. after parsing --verbose) simply switches level.

    Parameters
    ----------
    level : int, optional
        Explicit level such as logging.DEBUG; see resolve_level()
    log_file : str, optional
        Also append records to this file; stderr only when omitted
    """
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a script or module.

    Parameters
    ----------
    name : str
        Dotted logger name, normally __name__

    Returns
    -------
    logging.Logger
    """
    return logging.getLogger(name)
