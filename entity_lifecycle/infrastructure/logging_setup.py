"""Process-wide logging setup for applications embedding the lifecycle layer.

Library modules only ever call logging.getLogger(__name__); handlers and
levels are the embedding application's choice, made once at start-up.
"""

from __future__ import annotations

import logging

from entity_lifecycle.infrastructure.database import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Install a root stream handler at *level* (defaults to LOG_LEVEL)."""
    resolved = level if level is not None else settings.log_level
    if isinstance(resolved, str):
        resolved = resolved.upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
