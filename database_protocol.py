"""
Database Protocol - Interface contract for order store implementations.

The PostgreSQL store in ``orderdesk_db`` and the in-memory store used by the
test-suite both conform to this protocol. Rows are plain dicts keyed by
column name.
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

RowType = dict[str, Any]
RowList = list[dict[str, Any]]


@runtime_checkable
class DatabaseProtocol(Protocol):
    """Protocol describing the store methods the services rely on."""

    # ========== CONNECTION MANAGEMENT ==========
    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Get a database connection from the pool."""
        ...

    def close(self) -> None:
        """Close all database connections."""
        ...

    # ========== RESTAURANT METHODS ==========
    def get_restaurant_by_owner(self, owner_id: str) -> RowType | None:
        ...

    # ========== ORDER METHODS ==========
    def list_orders(self, restaurant_id: str) -> RowList:
        """All orders of a restaurant, newest first."""
        ...

    def get_order(self, order_id: str, restaurant_id: str | None = None) -> RowType | None:
        ...

    def update_order_status(self, order_id: str, status: str, restaurant_id: str | None = None) -> bool:
        ...

    def update_payment_confirmed(
        self, order_id: str, confirmed: bool, restaurant_id: str | None = None
    ) -> bool:
        ...

    def get_order_items(self, order_id: str) -> RowList:
        ...

    def count_customer_orders(self, customer_id: str, restaurant_id: str) -> int:
        ...

    # ========== CUSTOMER METHODS ==========
    def get_customer(self, customer_id: str) -> RowType | None:
        ...

    # ========== RIDER METHODS ==========
    def list_riders(self, restaurant_id: str, active_only: bool = False) -> RowList:
        """Active riders ordered by name, or all riders newest first."""
        ...

    def get_rider(self, rider_id: str, restaurant_id: str | None = None) -> RowType | None:
        ...

    def create_rider(
        self, restaurant_id: str, name: str, phone: str, email: str | None = None
    ) -> RowType:
        ...

    def update_rider(
        self, rider_id: str, restaurant_id: str, name: str, phone: str, email: str | None = None
    ) -> bool:
        ...

    def set_rider_active(self, rider_id: str, restaurant_id: str, is_active: bool) -> bool:
        ...

    def delete_rider(self, rider_id: str, restaurant_id: str) -> bool:
        ...

    # ========== TRACKING TOKEN METHODS ==========
    def get_latest_tracking_token(self, order_id: str, token_type: str) -> RowType | None:
        """Most recently created token of a type for an order."""
        ...

    def get_tracking_token(self, token: str, token_type: str) -> RowType | None:
        ...

    def assign_rider_with_token(
        self,
        order_id: str,
        rider_id: str,
        restaurant_id: str,
        token: str,
        expires_at: datetime,
        revoke_at: datetime | None = None,
    ) -> RowType | None:
        """Set the rider, expire older RIDER tokens and insert the new one atomically."""
        ...

    # ========== PAYMENT METHODS ==========
    def list_payment_invoices(self, restaurant_id: str) -> RowList:
        ...

    def get_payment_invoice(self, invoice_id: str, restaurant_id: str) -> RowType | None:
        ...

    def list_payment_receipts(self, restaurant_id: str) -> RowList:
        ...

    def get_payment_receipt(self, receipt_id: str, restaurant_id: str) -> RowType | None:
        ...
