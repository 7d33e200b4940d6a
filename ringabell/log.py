import logging
import sys
from typing import Union

LOGGER_NAME = "ringabell"
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Send package logs to stdout. Calling it again only updates level and stream."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, "_ringabell", False)), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._ringabell = True
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stdout)

    return logger
