"""Logging setup for Tutor Buddy."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for the whole process.

    Args:
        level: Log level name. Defaults to ``LOG_LEVEL`` from config.
    """
    if level is None:
        from tutor_buddy.config import LOG_LEVEL

        level = LOG_LEVEL

    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo stays off unless explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
