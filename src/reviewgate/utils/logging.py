"""Logging setup."""

import logging

from ..config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    """Configure root logging from settings (called once on startup)."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
    )
    # Keep third-party chatter at warning unless we are debugging
    if settings.log_level.upper() != "DEBUG":
        for noisy in ("httpx", "sqlalchemy.engine", "procrastinate"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
