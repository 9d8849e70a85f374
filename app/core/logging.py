"""Process-wide logging setup shared by the API and CLI entrypoints."""

import logging
import time

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Timestamps are rendered in UTC, hence the Z suffix.
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

# Audit entries for privileged mutations go to their own logger so they can be routed separately.
AUDIT_LOGGER_NAME = "app.audit"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls are no-ops (basicConfig semantics)."""
    logging.Formatter.converter = time.gmtime
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER_NAME)
