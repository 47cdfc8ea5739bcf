"""Logging setup shared by the API process and the CLI entrypoint."""

import logging
import sys

from kart_api.core.config import settings

LOG_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


def setup_logging() -> logging.Logger:
    """Configure the root logger once and return the application logger."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("kart_api")
