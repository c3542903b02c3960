# File: src/mstair/pp/xlogging/logger_factory.py
"""
Logger factory for creating CoreLogger instances.

Every module of the package obtains its logger through `create_logger(__name__)`.
"""

import logging
import sys
from pathlib import Path

from mstair.pp.xlogging.core_logger import CoreLogger


__all__ = ["create_logger"]


def create_logger(
    name: str | None,
    *,
    level: int | str | None = None,
) -> CoreLogger:
    """
    Return a CoreLogger with a consistent, context-aware name.

    Handles:
    - Normal imports (uses given name)
    - Direct script execution (__main__ becomes the script stem)
    - Anonymous loggers (uses the executable stem)
    """
    logger_name: str = name or ""

    if not logger_name or logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        if arg0 and arg0.exists():
            logger_name = arg0.stem
        else:
            exe = Path(sys.executable or "")
            logger_name = exe.stem if exe.stem else "embedded_main"

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        if level is not None:
            existing.setLevel(level)
        return existing

    logger = _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create or retrieve a CoreLogger through logging.getLogger().

    Temporarily sets CoreLogger as the logger class so the logger joins the
    logging hierarchy (parent relationships, propagation, caplog).

    :param name: Logger name.
    :return: CoreLogger instance.
    :raises TypeError: If getLogger() returns a logger of another class.
    """
    logging_class = logging.getLoggerClass()
    if logging_class is not CoreLogger:
        logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        if logging_class is not CoreLogger:
            logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


# End of file: src/mstair/pp/xlogging/logger_factory.py
