"""
Customer-related database operations.
"""
from __future__ import annotations

from psycopg.rows import dict_row


class CustomerMixin:
    """Mixin for customer lookups."""

    def get_customer(self, customer_id: str):
        """Get customer name/email by ID."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                "SELECT id, name, email FROM customers WHERE id = %s", (customer_id,)
            )
            result = cursor.fetchone()
            return dict(result) if result else None
