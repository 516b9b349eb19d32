"""
Subscription payment history database operations.
"""
from __future__ import annotations

from psycopg.rows import dict_row

_INVOICE_SELECT = """
    SELECT i.*, t.name AS tier_name, t.monthly_price AS tier_monthly_price
    FROM payment_invoices i
    LEFT JOIN subscription_tiers t ON i.tier_id = t.id
"""

_RECEIPT_SELECT = """
    SELECT r.*, t.name AS tier_name, t.monthly_price AS tier_monthly_price
    FROM payment_receipts r
    LEFT JOIN subscription_tiers t ON r.subscription_tier_id = t.id
"""


class PaymentMixin:
    """Mixin for read-only invoice and receipt history."""

    def list_payment_invoices(self, restaurant_id: str):
        """Get invoices of a restaurant with their tier, newest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                _INVOICE_SELECT + " WHERE i.restaurant_id = %s ORDER BY i.created_at DESC",
                (restaurant_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_payment_invoice(self, invoice_id: str, restaurant_id: str):
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                _INVOICE_SELECT + " WHERE i.id = %s AND i.restaurant_id = %s",
                (invoice_id, restaurant_id),
            )
            result = cursor.fetchone()
            return dict(result) if result else None

    def list_payment_receipts(self, restaurant_id: str):
        """Get receipts of a restaurant with their tier, newest first."""
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                _RECEIPT_SELECT + " WHERE r.restaurant_id = %s ORDER BY r.created_at DESC",
                (restaurant_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_payment_receipt(self, receipt_id: str, restaurant_id: str):
        with self.get_connection() as conn:
            cursor = conn.cursor(row_factory=dict_row)
            cursor.execute(
                _RECEIPT_SELECT + " WHERE r.id = %s AND r.restaurant_id = %s",
                (receipt_id, restaurant_id),
            )
            result = cursor.fetchone()
            return dict(result) if result else None
