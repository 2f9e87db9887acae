"""Logging setup."""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # SQL statements are logged through DB_ECHO instead
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
