"""
Logging configuration for the application.

Plain-text lines on stdout, one format for every logger. A filter on the
root handlers masks credential values (``password=...``, bearer tokens)
that reach a message, for example inside the text of an HTTP error.
"""

import logging
import re
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
REDACTED = "***"

_SECRET_PATTERN = re.compile(
    r"(?i)(password|token|authorization|session)(\"?\s*[=:]\s*\"?)(bearer\s+)?([^\s\"&,;]+)"
)

# Loggers that are chatty at INFO and say nothing this service needs
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "sqlalchemy.engine")


def redact(message: str) -> str:
    return _SECRET_PATTERN.sub(
        lambda m: f"{m.group(1)}{m.group(2)}{m.group(3) or ''}{REDACTED}", message
    )


class RedactSecretsFilter(logging.Filter):
    """Rewrites a record's message with credential values masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
            Unknown names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RedactSecretsFilter())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
