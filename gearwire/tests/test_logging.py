from __future__ import annotations

import logging

from gearwire.app.core.logging import APP_LOGGERS, configure_logging


def test_configure_logging_sets_app_logger_levels() -> None:
    root_logger = logging.getLogger()
    previous = {name: logging.getLogger(name).level for name in ("", *APP_LOGGERS)}
    try:
        assert configure_logging(debug=True) == logging.DEBUG
        assert root_logger.level == logging.DEBUG
        assert all(logging.getLogger(name).level == logging.DEBUG for name in APP_LOGGERS)
        assert logging.getLogger("gearwire.app.services.inference_service").isEnabledFor(logging.DEBUG)

        assert configure_logging() == logging.INFO
        assert logging.getLogger("gearwire").level == logging.INFO
    finally:
        for name, level in previous.items():
            logging.getLogger(name).setLevel(level)
