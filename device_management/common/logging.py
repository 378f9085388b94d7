"""
Logging configuration for the API process.
`configure_logging` runs once at startup; the coordinator, the monitoring transport and the
HTTP layer then log through the named loggers below.
"""

from __future__ import annotations

import logging
from typing import Final

from device_management.common.settings import get_settings

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
SERVICE_LOGGERS: Final[tuple[str, ...]] = ("api", "sensors", "monitoring")

_LOGGING_CONFIGURED = False


def resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Configure process-wide logging from LOG_LEVEL."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level = resolve_level(get_settings().LOG_LEVEL)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in SERVICE_LOGGERS:
        logging.getLogger(name).setLevel(level)
    # Connection-pool chatter from the monitoring session.
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
    _LOGGING_CONFIGURED = True
