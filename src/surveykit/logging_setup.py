"""Logging configuration for scripts that host surveykit.

The library itself only creates module loggers; it never installs handlers.
Host scripts call `configure_logging()` once to send every surveykit logger
to stdout.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig

_DICT_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
    "loggers": {
        "surveykit": {"level": "INFO"},
    },
}


def configure_logging(level: str = "INFO") -> None:
    """Configure logging once.

    If the root logger already has handlers, only the surveykit level is
    adjusted, to avoid duplicate output.
    """
    root = logging.getLogger()
    if not root.handlers:
        dictConfig(_DICT_CONFIG)
    logging.getLogger("surveykit").setLevel(level)
