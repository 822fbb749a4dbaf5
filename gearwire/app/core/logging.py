from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
APP_LOGGERS = ("gearwire", "uvicorn.error")


def configure_logging(debug: bool = False) -> int:
    level = logging.DEBUG if debug else logging.INFO
    root_logger = logging.getLogger()

    # basicConfig() is a no-op once uvicorn has installed its handlers.
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    root_logger.setLevel(level)
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)
    return level
