"""
Restaurant-related database operations.
"""
from __future__ import annotations

from psycopg.rows import dict_row

try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


class RestaurantMixin:
    """Mixin for restaurant lookups."""

    def get_restaurant_by_owner(self, owner_id: str):
        """Get the restaurant owned by an authenticated user."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                "SELECT * FROM restaurants WHERE owner_id = %s LIMIT 1", (str(owner_id),)
            )
            result = cursor.fetchone()
            return dict(result) if result else None
