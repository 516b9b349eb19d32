"""
Order board - the per-restaurant list view model.

Holds the last successfully loaded enriched orders and the NEW flags. Filter,
search and page belong to each request: several operators share one board,
so none of them is stored here. Every installed load bumps ``version``, and
each view carries a ``view_key`` built from the version, filter and search.
A client that sends back the key it rendered is moved to page 1 once the
data or its query has changed.

Reloads are single-flight: a refresh requested while one is running awaits
it instead of starting another, and a generation counter keeps an older
result from replacing a newer one.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.core.exceptions import DatabaseException
from app.core.order_math import format_currency, items_count_label
from app.core.utils import format_order_timestamp, isoformat_or_none, utc_now
from app.domain.order import EnrichedOrder
from app.domain.order_fsm import available_statuses, is_terminal, next_status
from app.domain.order_labels import status_display
from app.services.order_enrichment import NewOrderTracker, OrderEnrichmentService
from app.services.order_filters import (
    FILTER_ALL,
    PAGE_SIZE,
    PageResult,
    filter_orders,
    normalize_status_filter,
    page_window,
    paginate,
    status_counts,
)

logger = logging.getLogger(__name__)


def order_to_dict(order: EnrichedOrder, *, is_new: bool = False, currency: str = "AED") -> dict:
    """Serialize an enriched order for the admin list."""
    snapshot = order.order
    created_date, created_time = format_order_timestamp(snapshot.created_at)
    upcoming = next_status(snapshot.status)
    return {
        "id": snapshot.order_id,
        "status": snapshot.status.value,
        "status_display": status_display(snapshot.status).to_dict(),
        "next_status": upcoming.value if upcoming else None,
        "available_statuses": [s.value for s in available_statuses(snapshot.status)],
        "is_terminal": is_terminal(snapshot.status),
        "is_new": is_new,
        "phone_number": snapshot.phone_number,
        "delivery_address": snapshot.delivery_address,
        "delivery_notes": snapshot.delivery_notes,
        "is_self_pickup": snapshot.is_self_pickup,
        "payment_method": snapshot.payment_method,
        "payment_confirmed": snapshot.payment_confirmed,
        "assigned_rider_id": snapshot.assigned_rider_id,
        "total_amount": snapshot.total_amount,
        "delivery_fee": snapshot.delivery_fee,
        "subtotal": snapshot.subtotal,
        "total_display": format_currency(snapshot.total_amount, currency),
        "subtotal_display": format_currency(snapshot.subtotal, currency),
        "delivery_fee_display": format_currency(snapshot.delivery_fee, currency),
        "created_at": isoformat_or_none(snapshot.created_at),
        "created_date": created_date,
        "created_time": created_time,
        "items": [item.to_dict() for item in order.items],
        "items_label": items_count_label(len(order.items)),
        "customer": {
            "id": snapshot.customer_id,
            "name": order.customer_name,
            "email": order.customer_email,
            "order_count": order.customer_order_count,
            "is_new_customer": order.is_new_customer,
        },
        "rider_link": order.rider_link,
        "customer_link": order.customer_link,
    }


def view_key(version: int, status_filter: str, search: str) -> str:
    return f"{version}:{status_filter}:{search}"

@dataclass
class BoardView:
    page: PageResult[EnrichedOrder]
    window: list[int]
    counts: dict[str, int]
    new_order_ids: frozenset[str]
    status_filter: str
    search: str
    total_orders: int
    version: int = 0
    view_key: str = ""
    loaded_at: datetime | None = None
    last_error: str | None = None

    def to_dict(self, currency: str = "AED") -> dict[str, Any]:
        return {
            "orders": [
                order_to_dict(o, is_new=o.order_id in self.new_order_ids, currency=currency)
                for o in self.page.items
            ],
            "page": self.page.page,
            "total_pages": self.page.total_pages,
            "total": self.page.total,
            "range_text": self.page.range_text,
            "page_window": self.window,
            "status_counts": self.counts,
            "new_order_ids": sorted(self.new_order_ids),
            "new_orders_count": len(self.new_order_ids),
            "status_filter": self.status_filter,
            "search": self.search,
            "total_orders": self.total_orders,
            "version": self.version,
            "view_key": self.view_key,
            "loaded_at": isoformat_or_none(self.loaded_at),
            "last_error": self.last_error,
        }


@dataclass
class OrderBoard:
    """Per-restaurant list state; one instance per restaurant."""

    restaurant_id: str
    enrichment: OrderEnrichmentService
    page_size: int = PAGE_SIZE
    orders: list[EnrichedOrder] = field(default_factory=list)
    tracker: NewOrderTracker = field(default_factory=NewOrderTracker)
    version: int = 0
    loaded_at: datetime | None = None
    last_error: str | None = None
    _generation: int = 0
    _applied_generation: int = 0
    _inflight: asyncio.Task | None = field(default=None, repr=False)

    @property
    def loaded(self) -> bool:
        return self.loaded_at is not None

    @property
    def is_reloading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def apply_orders(self, orders: list[EnrichedOrder], generation: int) -> bool:
        """Install a load result unless a newer one is already in place."""
        if generation < self._applied_generation:
            logger.debug(
                "Dropping stale board load gen=%s (applied=%s)", generation, self._applied_generation
            )
            return False
        self._applied_generation = generation
        self.tracker.observe(orders)
        self.orders = orders
        self.loaded_at = utc_now()
        self.last_error = None
        self.version += 1
        return True

    async def _reload(self, generation: int) -> list[EnrichedOrder]:
        try:
            orders = await self.enrichment.load_orders(self.restaurant_id)
        except DatabaseException as e:
            logger.error(f"Board reload failed for restaurant {self.restaurant_id}: {e.message}")
            # Keep showing the previous list; a newer successful load wins.
            if generation > self._applied_generation:
                self.last_error = e.message
            raise
        self.apply_orders(orders, generation)
        return self.orders

    async def refresh(self, *, force: bool = False) -> list[EnrichedOrder]:
        """Reload the list.

        Without ``force`` a call made during a running reload joins it. With
        ``force`` (used after mutations) the running reload is awaited and a
        new one is started so the result reflects the mutation.
        """
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            if not force:
                return await asyncio.shield(inflight)
            try:
                await asyncio.shield(inflight)
            except DatabaseException:
                # already logged and recorded in last_error
                pass

        self._generation += 1
        task = asyncio.create_task(self._reload(self._generation))
        self._inflight = task
        return await asyncio.shield(task)

    def mark_viewed(self, order_id: str) -> bool:
        return self.tracker.mark_viewed(order_id)

    def find(self, order_id: str) -> EnrichedOrder | None:
        return next((o for o in self.orders if o.order_id == order_id), None)

    def view(
        self,
        status_filter: str | None = FILTER_ALL,
        search: str | None = None,
        page: int | None = 1,
        *,
        seen_key: str | None = None,
    ) -> BoardView:
        """Page of the loaded orders for one request.

        Unknown filters raise InvalidStatusError. The page drops back to 1 when
        ``seen_key`` was rendered for other data, filter or search.
        """
        normalized = normalize_status_filter(status_filter)
        term = (search or "").strip()
        key = view_key(self.version, normalized, term)
        if seen_key is not None and seen_key != key:
            page = 1
        filtered = filter_orders(self.orders, normalized, term)
        result = paginate(filtered, max(int(page or 1), 1), self.page_size)
        return BoardView(
            page=result,
            window=page_window(result.page, result.total_pages),
            counts=status_counts(self.orders),
            new_order_ids=self.tracker.new_order_ids,
            status_filter=normalized,
            search=term,
            total_orders=len(self.orders),
            version=self.version,
            view_key=key,
            loaded_at=self.loaded_at,
            last_error=self.last_error,
        )
