"""Logging configuration for talker."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from talker.config import TalkerConfig

LOGGER_NAME = "talker"


def setup_logging(config: TalkerConfig) -> logging.Logger:
    """Configure the ``talker`` logger.

    Full logs go to a file next to the task file. Only warnings and errors
    reach the terminal, on stderr, so the interactive prompt stays readable.

    Safe to call more than once: existing handlers are replaced.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        level=config.logging.console_level,
        show_path=False,
    )
    logger.addHandler(console_handler)

    if config.logging.file_name:
        log_file = Path(config.storage.directory) / config.logging.file_name
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as e:
            logger.warning("File logging disabled, cannot open %s: %s", log_file, e)
        else:
            file_handler.setLevel(config.logging.level)
            file_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            logger.addHandler(file_handler)

    return logger
