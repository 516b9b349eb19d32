"""Tests for the order board view model and its background poller."""
from __future__ import annotations

import asyncio

import pytest

from app.core.exceptions import DatabaseException, InvalidStatusError
from app.core.utils import get_field
from app.domain.order import EnrichedOrder, OrderSnapshot
from app.services.order_board import OrderBoard, order_to_dict
from app.services.order_enrichment import OrderEnrichmentService
from app.services.order_poller import BoardRegistry, OrderPoller


def _enriched(order_id: str, status: str = "PENDING", **row) -> EnrichedOrder:
    data = {"id": order_id, "status": status, "total_amount": 30, "delivery_fee": 5}
    data.update(row)
    return EnrichedOrder(order=OrderSnapshot.from_row(data, get_field=get_field))


class DummyEnrichment:
    """Returns queued results; each load can be held open by a gate event."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0
        self.gates: list[asyncio.Event] = []

    async def load_orders(self, restaurant_id: str):
        self.calls += 1
        index = self.calls - 1
        if index < len(self.gates):
            await self.gates[index].wait()
        result = self.results[min(index, len(self.results) - 1)]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.mark.asyncio
async def test_refresh_loads_and_flags_new_orders():
    board = OrderBoard("r1", DummyEnrichment([_enriched("a"), _enriched("b", "DELIVERED")]))

    orders = await board.refresh()

    assert [o.order_id for o in orders] == ["a", "b"]
    assert board.loaded
    view = board.view()
    assert view.new_order_ids == {"a"}
    assert view.total_orders == 2


@pytest.mark.asyncio
async def test_concurrent_refreshes_share_one_load():
    enrichment = DummyEnrichment([_enriched("a")])
    gate = asyncio.Event()
    enrichment.gates = [gate]
    board = OrderBoard("r1", enrichment)

    first = asyncio.create_task(board.refresh())
    second = asyncio.create_task(board.refresh())
    await asyncio.sleep(0)
    assert board.is_reloading
    gate.set()
    results = await asyncio.gather(first, second)

    assert enrichment.calls == 1
    assert results[0] == results[1]


@pytest.mark.asyncio
async def test_forced_refresh_runs_after_inflight_load():
    enrichment = DummyEnrichment([_enriched("a")], [_enriched("b"), _enriched("a")])
    gate = asyncio.Event()
    enrichment.gates = [gate]
    board = OrderBoard("r1", enrichment)

    poll = asyncio.create_task(board.refresh())
    await asyncio.sleep(0)
    forced = asyncio.create_task(board.refresh(force=True))
    await asyncio.sleep(0)
    gate.set()
    await poll
    orders = await forced

    assert enrichment.calls == 2
    assert [o.order_id for o in orders] == ["b", "a"]
    assert [o.order_id for o in board.orders] == ["b", "a"]


def test_stale_generation_is_dropped():
    board = OrderBoard("r1", DummyEnrichment([]))

    assert board.apply_orders([_enriched("new")], generation=2)
    assert not board.apply_orders([_enriched("old")], generation=1)

    assert [o.order_id for o in board.orders] == ["new"]


@pytest.mark.asyncio
async def test_failed_reload_keeps_previous_list():
    enrichment = DummyEnrichment([_enriched("a")], DatabaseException("Failed to load orders: boom"))
    board = OrderBoard("r1", enrichment)
    await board.refresh()

    with pytest.raises(DatabaseException):
        await board.refresh()

    assert [o.order_id for o in board.orders] == ["a"]
    assert board.last_error == "Failed to load orders: boom"
    assert board.view().last_error == "Failed to load orders: boom"


@pytest.mark.asyncio
async def test_older_failed_reload_does_not_mask_newer_success():
    enrichment = DummyEnrichment(DatabaseException("Failed to load orders: slow"), [_enriched("b")])
    slow = asyncio.Event()
    enrichment.gates = [slow]
    board = OrderBoard("r1", enrichment)

    stale = asyncio.create_task(board._reload(1))
    await asyncio.sleep(0)
    await board._reload(2)
    slow.set()
    with pytest.raises(DatabaseException):
        await stale

    assert [o.order_id for o in board.orders] == ["b"]
    assert board.last_error is None


@pytest.mark.asyncio
async def test_changed_data_or_query_sends_client_back_to_first_page():
    orders = [_enriched(f"o{i}") for i in range(25)]
    board = OrderBoard("r1", DummyEnrichment(orders), page_size=10)
    await board.refresh()
    rendered = board.view(page=3)

    assert rendered.page.items[0].order_id == "o20"
    assert board.view(page=3, seen_key=rendered.view_key).page.page == 3
    assert board.view("pending", page=3, seen_key=rendered.view_key).page.page == 1
    assert board.view(search="o", page=3, seen_key=rendered.view_key).page.page == 1

    await board.refresh()
    assert board.version == rendered.version + 1
    assert board.view(page=3, seen_key=rendered.view_key).page.page == 1
    assert board.view(page=3).page.page == 3

@pytest.mark.asyncio
async def test_views_do_not_share_query_state():
    board = OrderBoard(
        "r1",
        DummyEnrichment([_enriched("a"), _enriched("b", "PREPARING", phone_number="+971555000111")]),
    )
    await board.refresh()

    preparing = board.view("preparing", None)
    searched = board.view("all", " 000111 ")
    everything = board.view()

    assert [o.order_id for o in preparing.page.items] == ["b"]
    assert preparing.status_filter == "PREPARING"
    assert searched.search == "000111"
    assert [o.order_id for o in everything.page.items] == ["a", "b"]
    assert everything.status_filter == "all"


def test_unknown_filter_is_rejected():
    board = OrderBoard("r1", DummyEnrichment([]))

    with pytest.raises(InvalidStatusError):
        board.view("bogus")


def test_status_counts_ignore_filter_and_search():
    board = OrderBoard("r1", DummyEnrichment([]))
    board.apply_orders([_enriched("a"), _enriched("b", "PREPARING"), _enriched("c", "DELIVERED")], 1)

    view = board.view("preparing", "b")

    assert [o.order_id for o in view.page.items] == ["b"]
    assert view.counts == {"PENDING": 1, "PREPARING": 1}

@pytest.mark.asyncio
async def test_view_clamps_page_and_builds_window():
    board = OrderBoard("r1", DummyEnrichment([_enriched(f"o{i}") for i in range(23)]), page_size=10)
    await board.refresh()

    view = board.view(page=7)

    assert view.page.page == 3
    assert view.window == [1, 2, 3]
    assert view.page.range_text == "Showing 21-23 of 23 orders"


@pytest.mark.asyncio
async def test_mark_viewed_clears_flag():
    board = OrderBoard("r1", DummyEnrichment([_enriched("a")]))
    await board.refresh()

    assert board.mark_viewed("a") is True
    assert board.view().new_order_ids == frozenset()


def test_order_to_dict_shape():
    order = _enriched("a", "DISPATCHED", phone_number="+971500000001")

    data = order_to_dict(order, is_new=True, currency="USD")

    assert data["status_display"]["label"] == "Dispatched (Rider Assigned)"
    assert data["next_status"] == "OUT_FOR_DELIVERY"
    assert data["available_statuses"] == ["OUT_FOR_DELIVERY", "DELIVERED"]
    assert data["total_display"] == "$30.00"
    assert data["subtotal"] == 25.0
    assert data["items_label"] == "0 items"
    assert data["is_new"] is True
    assert data["customer"]["name"] == "Customer"


def test_board_view_to_dict_counts():
    board = OrderBoard("r1", DummyEnrichment([]))
    board.apply_orders([_enriched("a"), _enriched("b", "PREPARING"), _enriched("c", "PREPARING")], 1)

    data = board.view().to_dict(currency="AED")

    assert data["status_counts"] == {"PENDING": 1, "PREPARING": 2}
    assert data["new_orders_count"] == 3
    assert data["range_text"] == "Showing 1-3 of 3 orders"


@pytest.mark.asyncio
async def test_poller_reloads_until_stopped():
    enrichment = DummyEnrichment([_enriched("a")])
    board = OrderBoard("r1", enrichment)
    poller = OrderPoller(board, interval=0.01)

    poller.start()
    await asyncio.sleep(0.05)
    await poller.stop()
    calls = enrichment.calls
    await asyncio.sleep(0.03)

    assert calls >= 2
    assert enrichment.calls == calls
    assert not poller.running


@pytest.mark.asyncio
async def test_poller_survives_failed_reloads():
    enrichment = DummyEnrichment(DatabaseException("down"))
    board = OrderBoard("r1", enrichment)
    poller = OrderPoller(board, interval=0.01)

    poller.start()
    await asyncio.sleep(0.04)
    assert poller.running
    await poller.stop()

    assert enrichment.calls >= 2
    assert board.last_error == "down"


def test_poller_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        OrderPoller(OrderBoard("r1", DummyEnrichment([])), interval=0)


@pytest.mark.asyncio
async def test_registry_starts_pollers_for_open_boards(repo):
    registry = BoardRegistry(
        OrderEnrichmentService(repo, public_origin="https://desk.example.com"),
        page_size=10,
        poll_interval=60,
    )
    board = registry.get("r1")
    assert registry.get("r1") is board
    assert "r1" in registry and "r2" not in registry

    registry.start()
    registry.get("r2")
    assert set(registry._pollers) == {"r1", "r2"}

    await registry.stop()
    assert registry._pollers == {}


@pytest.mark.asyncio
async def test_registry_without_polling(repo):
    registry = BoardRegistry(
        OrderEnrichmentService(repo, public_origin="https://desk.example.com"),
        page_size=10,
        polling=False,
    )
    registry.start()
    registry.get("r1")

    assert registry._pollers == {}
    await registry.stop()
