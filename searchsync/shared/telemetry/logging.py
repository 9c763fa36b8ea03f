"""Logging configuration for searchsync."""

import logging
import sys

from searchsync.core.config import Settings, get_settings

# Loggers of the client stack that are noisy at DEBUG
_QUIET_LOGGERS = ("elastic_transport.transport", "sqlalchemy.engine.Engine")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure process-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO. Output goes
    to stdout. The Elasticsearch transport and SQLAlchemy engine loggers stay
    at WARNING unless debug is on.
    """
    settings = settings or get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not settings.debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
