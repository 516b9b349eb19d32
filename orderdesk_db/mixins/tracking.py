"""
Order tracking token database operations.
"""
from __future__ import annotations

from datetime import datetime

from psycopg.rows import dict_row

try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


class TrackingMixin:
    """Mixin for rider/customer tracking tokens."""

    def get_latest_tracking_token(self, order_id: str, token_type: str):
        """Most recently created token of a type for an order."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                SELECT * FROM order_tracking_tokens
                WHERE order_id = %s AND token_type = %s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (order_id, token_type),
            )
            result = cursor.fetchone()
            return dict(result) if result else None

    def get_tracking_token(self, token: str, token_type: str):
        """Look up a token string of the given type."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                SELECT * FROM order_tracking_tokens
                WHERE token = %s AND token_type = %s
                """,
                (token, token_type),
            )
            result = cursor.fetchone()
            return dict(result) if result else None

    def assign_rider_with_token(
        self,
        order_id: str,
        rider_id: str,
        restaurant_id: str,
        token: str,
        expires_at: datetime,
        revoke_at: datetime | None = None,
    ):
        """Attach a rider and store its RIDER token in one transaction.

        Older RIDER tokens are expired at ``revoke_at`` when it is given.
        Returns the new token row, or None when the order is not in the restaurant.
        """
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                UPDATE orders SET assigned_rider_id = %s, updated_at = CURRENT_TIMESTAMP
                WHERE id = %s AND restaurant_id = %s
                """,
                (rider_id, order_id, restaurant_id),
            )
            if cursor.rowcount == 0:
                return None
            if revoke_at is not None:
                cursor.execute(
                    """
                    UPDATE order_tracking_tokens SET expires_at = %s
                    WHERE order_id = %s AND token_type = 'RIDER' AND expires_at > %s
                    """,
                    (revoke_at, order_id, revoke_at),
                )
            cursor.execute(
                """
                INSERT INTO order_tracking_tokens (order_id, token, token_type, expires_at)
                VALUES (%s, %s, 'RIDER', %s)
                RETURNING *
                """,
                (order_id, token, expires_at),
            )
            logger.info(f"Rider {rider_id} assigned to order {order_id}")
            return dict(cursor.fetchone())
