"""
Logging Setup

Library modules only create named loggers; applications embedding codeforge
call configure_logging() once at startup.
"""

import logging

from codeforge.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure root logging for codeforge.

    Args:
        level: Log level override (defaults to CODEFORGE_LOG_LEVEL)
    """
    if level is None:
        level = get_settings().log_level

    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Suppress noisy third-party loggers (request lines would include query-string keys)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
