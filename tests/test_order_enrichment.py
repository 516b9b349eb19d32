"""Tests for order enrichment and new-order flagging."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import DatabaseException
from app.core.utils import get_field
from app.domain.order import EnrichedOrder, OrderSnapshot
from app.services.order_enrichment import NewOrderTracker, OrderEnrichmentService

ORIGIN = "https://desk.example.com"


@pytest.fixture()
def service(repo) -> OrderEnrichmentService:
    return OrderEnrichmentService(repo, public_origin=ORIGIN)


@pytest.mark.asyncio
async def test_enrichment_defaults_without_customer_or_tokens(store, service):
    store.add_order("ord-1")

    [order] = await service.load_orders("r1")

    assert order.customer_name == "Customer"
    assert order.customer_email == ""
    assert order.customer_order_count == 0
    assert order.is_new_customer is True
    assert order.items == []
    assert order.rider_link is None
    assert order.customer_link is None


@pytest.mark.asyncio
async def test_enrichment_attaches_items_and_customer(store, service):
    store.add_customer("cust-1", name="Layla", email="layla@example.com")
    store.add_order("ord-1", customer_id="cust-1")
    store.add_order("ord-0", customer_id="cust-1")
    store.add_item("ord-1", "Shawarma", quantity=2, price=12.5)
    store.add_item("ord-1", "Family Box", item_type="BUNDLE", price=40)

    order = await service.enrich_order(store.orders["ord-1"], "r1")

    assert order.customer_name == "Layla"
    assert order.customer_email == "layla@example.com"
    assert order.customer_order_count == 2
    assert order.is_new_customer is False
    assert [i.item_name for i in order.items] == ["Shawarma", "Family Box"]
    assert order.items[0].line_total == 25.0
    assert order.items[1].is_bundle


@pytest.mark.asyncio
async def test_first_order_marks_new_customer(store, service):
    store.add_customer("cust-1")
    store.add_order("ord-1", customer_id="cust-1")

    order = await service.enrich_order(store.orders["ord-1"], "r1")

    assert order.customer_order_count == 1
    assert order.is_new_customer is True


@pytest.mark.asyncio
async def test_links_use_newest_token(store, service):
    now = datetime.now(timezone.utc)
    store.add_rider("rider-1")
    store.add_order("ord-1", assigned_rider_id="rider-1")
    store.add_token("ord-1", "old-rider", "RIDER", created_at=now - timedelta(hours=2))
    store.add_token("ord-1", "new-rider", "RIDER", created_at=now)
    store.add_token("ord-1", "cust-tok", "CUSTOMER")

    order = await service.enrich_order(store.orders["ord-1"], "r1")

    assert order.rider_link == f"{ORIGIN}/rider/new-rider"
    assert order.customer_link == f"{ORIGIN}/track/cust-tok"


@pytest.mark.asyncio
async def test_rider_link_requires_assigned_rider(store, service):
    store.add_order("ord-1")
    store.add_token("ord-1", "orphan", "RIDER")

    order = await service.enrich_order(store.orders["ord-1"], "r1")

    assert order.rider_link is None


@pytest.mark.asyncio
async def test_load_orders_keeps_newest_first(store, service):
    base = datetime(2026, 3, 1, tzinfo=timezone.utc)
    store.add_order("old", created_at=base)
    store.add_order("new", created_at=base + timedelta(minutes=5))
    store.add_order("other", restaurant_id="r2", created_at=base)

    orders = await service.load_orders("r1")

    assert [o.order_id for o in orders] == ["new", "old"]


@pytest.mark.asyncio
async def test_failed_sub_fetch_fails_whole_load(store, service):
    store.add_order("ord-1")
    store.add_order("ord-2")
    store.fail_on.add("get_order_items")

    with pytest.raises(DatabaseException):
        await service.load_orders("r1")


@pytest.mark.asyncio
async def test_failed_list_raises_database_exception(store, service):
    store.fail_on.add("list_orders")

    with pytest.raises(DatabaseException) as exc:
        await service.load_orders("r1")
    assert "Failed to load orders" in exc.value.message


def _enriched(order_id: str, status: str = "PENDING") -> EnrichedOrder:
    row = {"id": order_id, "status": status}
    return EnrichedOrder(order=OrderSnapshot.from_row(row, get_field=get_field))


def test_tracker_flags_open_orders_on_first_load():
    tracker = NewOrderTracker()

    flagged = tracker.observe([_enriched("a"), _enriched("b", "DELIVERED"), _enriched("c", "RETURNED")])

    assert flagged == {"a", "c"}
    assert tracker.new_order_ids == {"a", "c"}


def test_tracker_keeps_flags_until_viewed():
    tracker = NewOrderTracker()
    tracker.observe([_enriched("a")])

    flagged = tracker.observe([_enriched("b"), _enriched("a")])

    assert flagged == {"b"}
    assert tracker.is_new("a") and tracker.is_new("b")

    assert tracker.mark_viewed("a") is True
    assert tracker.mark_viewed("a") is False
    tracker.observe([_enriched("b"), _enriched("a")])
    assert tracker.new_order_ids == {"b"}


def test_tracker_drops_orders_that_disappear():
    tracker = NewOrderTracker()
    tracker.observe([_enriched("a"), _enriched("b")])

    tracker.observe([_enriched("b")])

    assert tracker.new_order_ids == {"b"}


def test_tracker_ignores_cancelled_arrivals():
    tracker = NewOrderTracker()
    tracker.observe([_enriched("a")])

    flagged = tracker.observe([_enriched("x", "CANCELLED"), _enriched("a")])

    assert flagged == set()
