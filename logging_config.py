"""Logging setup shared by the API server, services and the database layer."""
from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("orderdesk")


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure root logging once; safe to call repeatedly."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not any(getattr(h, "_orderdesk", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._orderdesk = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(numeric_level)

    # psycopg pool is chatty at INFO
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)
    return logger
