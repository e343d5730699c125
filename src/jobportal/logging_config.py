"""Logging setup for the server process."""

import logging

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> str:
    """
    Configure root logging for the application.

    Args:
        level: Level name; unknown names fall back to INFO

    Returns:
        The level name actually applied
    """
    level = (level or "INFO").upper()
    invalid = level not in VALID_LEVELS
    if invalid:
        requested, level = level, "INFO"

    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT)
    if invalid:
        logging.getLogger(__name__).warning(
            "Invalid LOG_LEVEL %r, using INFO. Valid levels: %s",
            requested,
            ", ".join(VALID_LEVELS),
        )
    return level
