import logging
import os
from typing import Optional

from .config import Settings

LOGGER_NAME = "kvstore"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Attach a handler to the package logger once.

    Logs go to ``settings.log_file`` when set, otherwise to stderr.
    """
    settings = settings or Settings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    if logger.handlers:
        return logger
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(settings.log_file)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
