"""Subscription payment history repository adapter."""
from __future__ import annotations

from app.core.async_db import AsyncDBProxy
from app.infra.db.orders_repo import as_async
from database_protocol import DatabaseProtocol


class PaymentsRepository:
    def __init__(self, db: DatabaseProtocol | AsyncDBProxy):
        self._db = as_async(db)

    async def list_invoices(self, restaurant_id: str) -> list[dict]:
        return await self._db.list_payment_invoices(restaurant_id)

    async def get_invoice(self, invoice_id: str, restaurant_id: str) -> dict | None:
        return await self._db.get_payment_invoice(invoice_id, restaurant_id)

    async def list_receipts(self, restaurant_id: str) -> list[dict]:
        return await self._db.list_payment_receipts(restaurant_id)

    async def get_receipt(self, receipt_id: str, restaurant_id: str) -> dict | None:
        return await self._db.get_payment_receipt(receipt_id, restaurant_id)
