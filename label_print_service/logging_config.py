"""
Logging configuration for the Label Print Service.

Every record carries the name of the thread that produced it, so the
output of concurrent upload requests and the queue drain can be told
apart.

Log Format:
    2026-10-19 10:15:30 [INFO    ] [MainThread] label_print_service.app - Serving on 127.0.0.1:8080
    2026-10-19 10:15:31 [INFO    ] [Thread-3] label_print_service.executor - Printed 62x100 on QL-500

Usage:
    from label_print_service.logging_config import setup_logging, get_logger

    setup_logging('INFO', log_dir=None)
    logger = get_logger(__name__)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

APP_LOGGER = 'label_print_service'

LOG_FORMAT = '%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ThreadContextFilter(logging.Filter):
    """Adds ``thread_name`` to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        return True


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        log_level: Minimum level, as a number or a name like 'DEBUG'
        log_dir: Directory for rotating log files; console only when None

    Returns:
        The configured application logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allow re-configuration
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            filename=log_dir / f'{APP_LOGGER}.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f'{APP_LOGGER}_error.log',
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info('File logging enabled: %s', log_dir)

    logger.info('Logging configured at level %s', logging.getLevelName(log_level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the application namespace."""
    if not name.startswith(APP_LOGGER):
        name = f'{APP_LOGGER}.{name}'
    return logging.getLogger(name)


def get_job_logger(job_id: str) -> logging.Logger:
    """Logger for a single print job, e.g. ``label_print_service.job.JOB-1A2B3C4D``."""
    return logging.getLogger(f'{APP_LOGGER}.job.{job_id}')
