"""
Logging setup shared by the services.

Each service gets a named logger with a single console handler so messages
from the role manager, profile service and document store are easy to tell
apart in the terminal.
"""

import logging

from app.core.config import settings

LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, attaching the console handler once."""
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
