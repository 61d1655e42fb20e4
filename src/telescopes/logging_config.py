"""
Logging Configuration
Attaches console and file output to the 'telescopes' package logger.

Modules only call `logging.getLogger(__name__)`; nothing is printed until the
entry point calls `setup_logging`.
"""
import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "telescopes"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Debug runs also show where a record came from
DEBUG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the package logger.

    Handlers from an earlier call are closed and replaced, so calling this
    twice never duplicates output.

    Args:
        level: Logging level for the logger and all its handlers.
        log_file: Optional path; the file is overwritten on each run.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    _detach_handlers(logger)
    logger.setLevel(level)

    formatter = logging.Formatter(
        DEBUG_FORMAT if level <= logging.DEBUG else LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    target = f"stdout and {log_file}" if log_file else "stdout"
    logger.info(f"Logging {logging.getLevelName(level)} records to {target}.")
    return logger
