"""
Logging setup for the API process.
"""

from __future__ import annotations

import logging
import logging.config
import re

from . import config

_JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")


class TokenRedactionFilter(logging.Filter):
    """
    Replace anything shaped like a JWT with a placeholder.

    Session tokens are bearer credentials, so they must never reach log sinks.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if _JWT_PATTERN.search(message):
            record.msg = _JWT_PATTERN.sub("[REDACTED_TOKEN]", message)
            record.args = None
        return True


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "redact_tokens": {"()": TokenRedactionFilter},
            },
            "formatters": {
                "standard": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "filters": ["redact_tokens"],
                },
            },
            "root": {
                "level": level or config.log_level(),
                "handlers": ["console"],
            },
        }
    )
