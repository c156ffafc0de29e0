"""
Logging configuration for Async Doctor.

Provides structured logging with rich formatting for terminal output.

Handlers are attached to the ``async_doctor`` logger, never to the root
logger: ``async-doctor trace`` runs the traced program in this process and
its own logging setup must come out unchanged.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "async_doctor"
TRACER_NOTICE_LOGGER = "async_doctor.tracer.notice"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the async_doctor logger with a rich handler.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to write logs to

    Returns:
        Configured logger instance for async_doctor
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Messages carry file paths and source snippets with brackets.
            markup=False,
            show_time=True,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'async_doctor.analysis')
              If None, returns the root async_doctor logger

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER)

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)


def get_tracer_notice_logger() -> logging.Logger:
    """
    Logger for the tracer's one-line flush notice.

    It owns a bare stderr handler and does not propagate, so the notice
    shows up whatever the host program did to logging, and ``--quiet`` on
    the CLI does not hide where the trace went.
    """
    logger = logging.getLogger(TRACER_NOTICE_LOGGER)
    if not logger.handlers:
        logger.addHandler(
            RichHandler(
                console=Console(stderr=True, highlight=False),
                markup=False,
                show_time=False,
                show_level=False,
                show_path=False,
            )
        )
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger
