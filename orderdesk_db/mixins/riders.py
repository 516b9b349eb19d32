"""
Delivery rider database operations.
"""
from __future__ import annotations

from psycopg.rows import dict_row

try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


class RiderMixin:
    """Mixin for delivery rider CRUD."""

    def list_riders(self, restaurant_id: str, active_only: bool = False):
        """Active riders ordered by name, or every rider newest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            if active_only:
                cursor.execute(
                    """
                    SELECT * FROM delivery_riders
                    WHERE restaurant_id = %s AND is_active = TRUE
                    ORDER BY name
                    """,
                    (restaurant_id,),
                )
            else:
                cursor.execute(
                    """
                    SELECT * FROM delivery_riders
                    WHERE restaurant_id = %s
                    ORDER BY created_at DESC
                    """,
                    (restaurant_id,),
                )
            return [dict(row) for row in cursor.fetchall()]

    def get_rider(self, rider_id: str, restaurant_id: str | None = None):
        """Get rider by ID, optionally scoped to a restaurant."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            if restaurant_id is not None:
                cursor.execute(
                    "SELECT * FROM delivery_riders WHERE id = %s AND restaurant_id = %s",
                    (rider_id, restaurant_id),
                )
            else:
                cursor.execute("SELECT * FROM delivery_riders WHERE id = %s", (rider_id,))
            result = cursor.fetchone()
            return dict(result) if result else None

    def create_rider(
        self, restaurant_id: str, name: str, phone: str, email: str | None = None
    ):
        """Add a rider and return the stored row."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                INSERT INTO delivery_riders (restaurant_id, name, phone, email, is_active)
                VALUES (%s, %s, %s, %s, TRUE)
                RETURNING *
                """,
                (restaurant_id, name, phone, email),
            )
            row = dict(cursor.fetchone())
            logger.info(f"Rider {row['id']} added to restaurant {restaurant_id}")
            return row

    def update_rider(
        self,
        rider_id: str,
        restaurant_id: str,
        name: str,
        phone: str,
        email: str | None = None,
    ) -> bool:
        """Update rider contact details."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE delivery_riders SET name = %s, phone = %s, email = %s
                WHERE id = %s AND restaurant_id = %s
                """,
                (name, phone, email, rider_id, restaurant_id),
            )
            return cursor.rowcount > 0

    def set_rider_active(self, rider_id: str, restaurant_id: str, is_active: bool) -> bool:
        """Enable or disable a rider."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE delivery_riders SET is_active = %s
                WHERE id = %s AND restaurant_id = %s
                """,
                (bool(is_active), rider_id, restaurant_id),
            )
            return cursor.rowcount > 0

    def delete_rider(self, rider_id: str, restaurant_id: str) -> bool:
        """Delete a rider; orders keep running with assigned_rider_id cleared."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM delivery_riders WHERE id = %s AND restaurant_id = %s",
                (rider_id, restaurant_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info(f"Rider {rider_id} deleted from restaurant {restaurant_id}")
            return deleted
