"""Riders repository adapter."""
from __future__ import annotations

from app.core.async_db import AsyncDBProxy
from app.core.exceptions import RiderNotFoundException
from app.infra.db.orders_repo import as_async
from database_protocol import DatabaseProtocol


class RidersRepository:
    def __init__(self, db: DatabaseProtocol | AsyncDBProxy):
        self._db = as_async(db)

    async def list_riders(self, restaurant_id: str, *, active_only: bool = False) -> list[dict]:
        return await self._db.list_riders(restaurant_id, active_only)

    async def get_rider(self, rider_id: str, restaurant_id: str) -> dict | None:
        return await self._db.get_rider(rider_id, restaurant_id)

    async def get_rider_or_raise(self, rider_id: str, restaurant_id: str) -> dict:
        """Rider row scoped to a restaurant.

        Raises:
            RiderNotFoundException: If the rider does not exist in the restaurant
        """
        row = await self.get_rider(rider_id, restaurant_id)
        if not row:
            raise RiderNotFoundException(rider_id)
        return row

    async def create_rider(
        self, restaurant_id: str, name: str, phone: str, email: str | None
    ) -> dict:
        return await self._db.create_rider(restaurant_id, name, phone, email)

    async def update_rider(
        self, rider_id: str, restaurant_id: str, name: str, phone: str, email: str | None
    ) -> bool:
        return bool(await self._db.update_rider(rider_id, restaurant_id, name, phone, email))

    async def set_active(self, rider_id: str, restaurant_id: str, is_active: bool) -> bool:
        return bool(await self._db.set_rider_active(rider_id, restaurant_id, is_active))

    async def delete_rider(self, rider_id: str, restaurant_id: str) -> bool:
        return bool(await self._db.delete_rider(rider_id, restaurant_id))
