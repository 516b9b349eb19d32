"""Orders repository adapter for application use cases."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from app.core.async_db import AsyncDBProxy
from app.core.exceptions import RestaurantNotFoundException
from app.core.utils import get_field as _get_field
from database_protocol import DatabaseProtocol


def as_async(db: DatabaseProtocol | AsyncDBProxy) -> AsyncDBProxy:
    """Wrap a sync store in an AsyncDBProxy unless it already is one."""
    if isinstance(db, AsyncDBProxy):
        return db
    return AsyncDBProxy(db)


class OrdersRepository:
    """Async access to orders and the records hanging off them."""

    def __init__(self, db: DatabaseProtocol | AsyncDBProxy):
        self._db = as_async(db)

    @property
    def db(self) -> AsyncDBProxy:
        return self._db

    def get_field(self, row: Any, key: str, default: Any = None) -> Any:
        return _get_field(row, key, default)

    async def get_restaurant_by_owner(self, owner_id: str) -> dict | None:
        return await self._db.get_restaurant_by_owner(owner_id)

    async def get_restaurant_by_owner_or_raise(self, owner_id: str) -> dict:
        """Restaurant row of an owner.

        Raises:
            RestaurantNotFoundException: If the owner has no restaurant
        """
        row = await self.get_restaurant_by_owner(owner_id)
        if not row:
            raise RestaurantNotFoundException(owner_id)
        return row

    async def list_orders(self, restaurant_id: str) -> list[dict]:
        return await self._db.list_orders(restaurant_id)

    async def get_order(self, order_id: str, restaurant_id: str | None = None) -> dict | None:
        if not order_id:
            return None
        return await self._db.get_order(order_id, restaurant_id)

    async def set_order_status(
        self, order_id: str, status: str, restaurant_id: str | None = None
    ) -> bool:
        return bool(await self._db.update_order_status(order_id, status, restaurant_id))

    async def set_payment_confirmed(
        self, order_id: str, confirmed: bool, restaurant_id: str | None = None
    ) -> bool:
        return bool(await self._db.update_payment_confirmed(order_id, confirmed, restaurant_id))

    async def get_order_items(self, order_id: str) -> list[dict]:
        return await self._db.get_order_items(order_id) or []

    async def get_customer(self, customer_id: str | None) -> dict | None:
        if not customer_id:
            return None
        return await self._db.get_customer(customer_id)

    async def count_customer_orders(self, customer_id: str, restaurant_id: str) -> int:
        return int(await self._db.count_customer_orders(customer_id, restaurant_id) or 0)

    async def get_rider(self, rider_id: str | None, restaurant_id: str | None = None) -> dict | None:
        if not rider_id:
            return None
        return await self._db.get_rider(rider_id, restaurant_id)

    async def get_latest_token(self, order_id: str, token_type: str) -> dict | None:
        return await self._db.get_latest_tracking_token(order_id, token_type)

    async def get_token(self, token: str, token_type: str) -> dict | None:
        if not token:
            return None
        return await self._db.get_tracking_token(token, token_type)

    async def assign_rider_with_token(
        self,
        order_id: str,
        rider_id: str,
        restaurant_id: str,
        token: str,
        expires_at: datetime,
        revoke_at: datetime | None = None,
    ) -> dict | None:
        return await self._db.assign_rider_with_token(
            order_id, rider_id, restaurant_id, token, expires_at, revoke_at
        )
