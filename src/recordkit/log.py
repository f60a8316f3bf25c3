from __future__ import annotations

import logging

LOGGER_NAME = "recordkit"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Attach a stream handler to the package logger if none is configured.

    Library modules only create child loggers; applications that want to
    see cache builds call this once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[recordkit] %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
