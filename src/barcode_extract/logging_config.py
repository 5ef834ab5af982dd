"""
Central logging configuration for the command line entry point.

Library modules only create module-level loggers; handlers and levels are
set up once here.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig


def configure_logging(*, debug: bool = False) -> None:
    level = "DEBUG" if debug else "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "console",
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {
                "barcode_extract": {"handlers": ["console"], "level": level, "propagate": False},
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }
    )

    logging.getLogger("barcode_extract").debug("Logging configured (level=%s)", level)
