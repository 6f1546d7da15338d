# dbqueue/backend/app/logging_config.py
import logging
from typing import Optional

from . import config

LOGGER_NAME = "dbqueue"
LOG_FORMAT = "%(asctime)s [dbqueue] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stream handler to the package logger.
    Safe to call more than once: the handler is only added the first time.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level or config.log_level())
    if not any(getattr(h, "_dbqueue", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._dbqueue = True
        logger.addHandler(handler)
    return logger
