"""
Logging setup shared by the API process and maintenance scripts.

Usage:
    from school_ledger.logging_config import setup_logging
    setup_logging()
"""

import logging
import sys

from school_ledger.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every statement or connection at INFO
NOISY_LOGGERS = [
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic.runtime.migration",
    "uvicorn.access",
]


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    The level defaults to the LOG_LEVEL setting. Calling this
    more than once replaces the handler instead of stacking
    duplicates.
    """
    level_name = (level or get_settings().LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info("Logging initialised at %s", logging.getLevelName(log_level))
    return root_logger
