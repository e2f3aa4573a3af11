"""
Logging Configuration
Sets up console (and optional file) logging for the tour engine and the experiment harness.
The library modules only create loggers; hosts call setup_logging() once.
"""
import logging
import sys
from typing import Iterable, Optional

PACKAGE_LOGGERS = ("tsp_engine", "tsp_framework")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  names: Iterable[str] = PACKAGE_LOGGERS) -> None:
    """
    Configures the package loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        names: Logger namespaces to configure.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        # avoid duplicate handlers when called twice
        if logger.hasHandlers():
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logging.getLogger(PACKAGE_LOGGERS[0]).debug("Logging initialized.")
