"""
Core database utilities - connection pool and configuration.
"""
from __future__ import annotations

import os
from contextlib import contextmanager

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

# Logging
try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


# Database connection configuration
DATABASE_URL = os.environ.get("DATABASE_URL", "")
MIN_CONNECTIONS = int(os.environ.get("DB_MIN_CONN", "1"))
MAX_CONNECTIONS = int(os.environ.get("DB_MAX_CONN", "5"))
POOL_WAIT_TIMEOUT = int(os.environ.get("DB_POOL_WAIT_TIMEOUT", "60"))


def safe_dsn(url: str) -> str:
    """Strip credentials from a DSN for log output."""
    return url.split("@", 1)[1] if "@" in url else url


class DatabaseCore:
    """Core database functionality - connection pool and base operations."""

    def __init__(
        self,
        database_url: str | None = None,
        *,
        min_connections: int = MIN_CONNECTIONS,
        max_connections: int = MAX_CONNECTIONS,
        pool_wait_timeout: int = POOL_WAIT_TIMEOUT,
    ):
        """Initialize PostgreSQL database connection."""
        self.database_url = database_url or DATABASE_URL
        self.db_name = "PostgreSQL"

        if not self.database_url:
            raise ValueError("DATABASE_URL environment variable is required for PostgreSQL")

        logger.info(f"Connecting to ...@{safe_dsn(self.database_url)}")

        try:
            self.pool = ConnectionPool(
                conninfo=self.database_url,
                min_size=min_connections,
                max_size=max_connections,
                max_waiting=50,
                timeout=pool_wait_timeout,
                open=True,
                kwargs={"row_factory": dict_row},
            )
            logger.info(
                f"PostgreSQL connection pool created (min={min_connections}, max={max_connections})"
            )
        except Exception as e:
            logger.error(f"Failed to create PostgreSQL connection pool: {e}")
            raise

    @contextmanager
    def get_connection(self):
        """Context manager for database connections from pool."""
        with self.pool.connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Database error: {e}")
                raise

    def close(self):
        """Close all connections in the pool."""
        if hasattr(self, "pool") and self.pool:
            self.pool.close()
            logger.info("PostgreSQL connection pool closed")
