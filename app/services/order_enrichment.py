"""
Order enrichment - attaches line items, customer info and share links.

Every order of a list is enriched concurrently and, inside one order, the
item/customer/token lookups run concurrently as well. The store is sync, so
each lookup runs in a worker thread through ``AsyncDBProxy``.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from app.core.exceptions import DatabaseException
from app.core.utils import get_field
from app.domain.entities import OrderItem
from app.domain.order import EnrichedOrder, OrderSnapshot, TokenType
from app.domain.order_fsm import CLOSED_FOR_NEW_FLAG
from app.infra.db.orders_repo import OrdersRepository
from app.services.tracking_tokens import build_customer_link, build_rider_link

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Customer"


class OrderEnrichmentService:
    """Builds ``EnrichedOrder`` objects from raw order rows."""

    def __init__(self, repo: OrdersRepository, *, public_origin: str):
        self.repo = repo
        self.public_origin = public_origin

    async def _customer_info(self, customer_id: str | None, restaurant_id: str) -> dict[str, Any]:
        info: dict[str, Any] = {
            "customer_name": DEFAULT_CUSTOMER_NAME,
            "customer_email": "",
            "customer_order_count": 0,
            "is_new_customer": True,
        }
        if not customer_id:
            return info

        customer, order_count = await asyncio.gather(
            self.repo.get_customer(customer_id),
            self.repo.count_customer_orders(customer_id, restaurant_id),
        )
        if customer:
            info["customer_name"] = get_field(customer, "name") or DEFAULT_CUSTOMER_NAME
            info["customer_email"] = get_field(customer, "email") or ""
        info["customer_order_count"] = order_count
        info["is_new_customer"] = order_count == 1
        return info

    async def _rider_link(self, order: OrderSnapshot) -> str | None:
        if not order.assigned_rider_id:
            return None
        row = await self.repo.get_latest_token(order.order_id, TokenType.RIDER.value)
        token = get_field(row, "token")
        return build_rider_link(self.public_origin, token) if token else None

    async def _customer_link(self, order: OrderSnapshot) -> str | None:
        row = await self.repo.get_latest_token(order.order_id, TokenType.CUSTOMER.value)
        token = get_field(row, "token")
        return build_customer_link(self.public_origin, token) if token else None

    async def enrich_order(self, row: Any, restaurant_id: str) -> EnrichedOrder:
        order = OrderSnapshot.from_row(row, get_field=get_field)
        items, customer, rider_link, customer_link = await asyncio.gather(
            self.repo.get_order_items(order.order_id),
            self._customer_info(order.customer_id, restaurant_id),
            self._rider_link(order),
            self._customer_link(order),
        )
        return EnrichedOrder(
            order=order,
            items=[OrderItem.model_validate(item) for item in items],
            rider_link=rider_link,
            customer_link=customer_link,
            **customer,
        )

    async def enrich_orders(self, rows: Iterable[Any], restaurant_id: str) -> list[EnrichedOrder]:
        """Enrich all rows, preserving input order.

        Any failed lookup fails the whole batch with ``DatabaseException``.
        """
        try:
            return list(
                await asyncio.gather(*(self.enrich_order(row, restaurant_id) for row in rows))
            )
        except DatabaseException:
            raise
        except Exception as e:
            logger.error(f"Order enrichment failed for restaurant {restaurant_id}: {e}")
            raise DatabaseException(f"Failed to load orders: {e}") from e

    async def load_orders(self, restaurant_id: str) -> list[EnrichedOrder]:
        """Fetch the restaurant's orders newest first and enrich them."""
        try:
            rows = await self.repo.list_orders(restaurant_id)
        except Exception as e:
            logger.error(f"Failed to list orders for restaurant {restaurant_id}: {e}")
            raise DatabaseException(f"Failed to load orders: {e}") from e
        return await self.enrich_orders(rows, restaurant_id)


class NewOrderTracker:
    """Flags orders that appeared since the previous load.

    Starts empty, so the first load flags every open order.
    """

    def __init__(self) -> None:
        self._seen_ids: set[str] = set()
        self._new_ids: set[str] = set()

    @property
    def new_order_ids(self) -> frozenset[str]:
        return frozenset(self._new_ids)

    def observe(self, orders: Iterable[EnrichedOrder]) -> set[str]:
        """Record a fresh load; returns ids newly flagged by this load."""
        orders = list(orders)
        current_ids = {o.order_id for o in orders}
        flagged = {
            o.order_id
            for o in orders
            if o.order_id not in self._seen_ids and o.status not in CLOSED_FOR_NEW_FLAG
        }
        self._new_ids = (self._new_ids & current_ids) | flagged
        self._seen_ids = current_ids
        return flagged

    def is_new(self, order_id: str) -> bool:
        return order_id in self._new_ids

    def mark_viewed(self, order_id: str) -> bool:
        if order_id in self._new_ids:
            self._new_ids.discard(order_id)
            return True
        return False
