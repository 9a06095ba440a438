"""
Logging configuration.

Console logging with one standard format for the API and the operator scripts.
"""

import logging
import logging.config


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    level = (level or "INFO").upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
        "loggers": {
            # SQL echo is controlled by the engine, keep the pool quiet
            "sqlalchemy.pool": {"level": "WARNING"},
        },
    })
