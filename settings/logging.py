"""Logging configuration."""

import sys

from loguru import logger

from settings import LOG_DIR

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <cyan>{extra[run]}</cyan> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {extra[run]} | {name}:{function}:{line} | {message}"


def setup_logging(level: str = "INFO", to_file: bool = True):
    """Configure console and optional rotating file output.

    Every record carries a ``run`` extra so forecast workers can bind their
    run id with ``logger.bind(run=...)``; unbound records show ``-``.
    """
    logger.remove()
    logger.configure(extra={"run": "-"})

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if to_file:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(
            LOG_DIR / "electoral_{time:YYYY-MM-DD}.log",
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention="14 days",
            compression="gz",
        )
        logger.info("Logging to {}", LOG_DIR)

    return logger
