"""
Order-related database operations.
"""
from __future__ import annotations

from psycopg.rows import dict_row

try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


class OrderMixin:
    """Mixin for order and order item operations."""

    def list_orders(self, restaurant_id: str):
        """Get all orders for a restaurant, newest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                "SELECT * FROM orders WHERE restaurant_id = %s ORDER BY created_at DESC",
                (restaurant_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_order(self, order_id: str, restaurant_id: str | None = None):
        """Get order by ID, optionally scoped to a restaurant."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            if restaurant_id is not None:
                cursor.execute(
                    "SELECT * FROM orders WHERE id = %s AND restaurant_id = %s",
                    (order_id, restaurant_id),
                )
            else:
                cursor.execute("SELECT * FROM orders WHERE id = %s", (order_id,))
            result = cursor.fetchone()
            return dict(result) if result else None

    def update_order_status(
        self, order_id: str, status: str, restaurant_id: str | None = None
    ) -> bool:
        """Update order status.

        Returns:
            True if a row was updated
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            if restaurant_id is not None:
                cursor.execute(
                    """
                    UPDATE orders SET status = %s, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND restaurant_id = %s
                    """,
                    (status, order_id, restaurant_id),
                )
            else:
                cursor.execute(
                    "UPDATE orders SET status = %s, updated_at = CURRENT_TIMESTAMP WHERE id = %s",
                    (status, order_id),
                )
            updated = cursor.rowcount > 0
            if updated:
                logger.info(f"Order {order_id} status -> {status}")
            return updated

    def update_payment_confirmed(
        self, order_id: str, confirmed: bool, restaurant_id: str | None = None
    ) -> bool:
        """Set the payment_confirmed flag of an order."""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            if restaurant_id is not None:
                cursor.execute(
                    """
                    UPDATE orders SET payment_confirmed = %s, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s AND restaurant_id = %s
                    """,
                    (bool(confirmed), order_id, restaurant_id),
                )
            else:
                cursor.execute(
                    """
                    UPDATE orders SET payment_confirmed = %s, updated_at = CURRENT_TIMESTAMP
                    WHERE id = %s
                    """,
                    (bool(confirmed), order_id),
                )
            return cursor.rowcount > 0

    def get_order_items(self, order_id: str):
        """Get line items of an order."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                "SELECT * FROM order_items WHERE order_id = %s ORDER BY created_at, id",
                (order_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def count_customer_orders(self, customer_id: str, restaurant_id: str) -> int:
        """Count a customer's orders at one restaurant."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                """
                SELECT COUNT(*) AS total FROM orders
                WHERE customer_id = %s AND restaurant_id = %s
                """,
                (customer_id, restaurant_id),
            )
            result = cursor.fetchone()
            return int(result["total"]) if result else 0
