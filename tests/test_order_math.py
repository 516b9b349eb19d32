from __future__ import annotations

from decimal import Decimal

from app.core.order_math import (
    calc_items_total,
    calc_subtotal,
    currency_symbol,
    format_currency,
    items_count_label,
)
from app.core.utils import format_order_timestamp, isoformat_or_none, parse_datetime


def test_calc_items_total_handles_bad_values() -> None:
    items = [
        {"price": 10, "quantity": 2},
        {"price": "5.5", "quantity": "3"},
        {"price": None, "quantity": 1},
        {"price": "bad", "quantity": 4},
    ]
    assert calc_items_total(items) == 36.5


def test_subtotal_excludes_delivery_fee() -> None:
    assert calc_subtotal(Decimal("55.00"), Decimal("5.00")) == 50.0
    assert calc_subtotal(40, None) == 40.0


def test_format_currency() -> None:
    assert format_currency(12.5, "USD") == "$12.50"
    assert format_currency(None, "EUR") == "€0.00"
    assert currency_symbol("chf") == "CHF"


def test_items_count_label() -> None:
    assert items_count_label(1) == "1 item"
    assert items_count_label(3) == "3 items"


def test_timestamp_helpers() -> None:
    moment = parse_datetime("2026-01-05T15:04:00Z")
    assert moment is not None and moment.tzinfo is not None
    assert format_order_timestamp(moment) == ("Mon, Jan 5, 2026", "03:04 PM")
    assert format_order_timestamp(None) == ("", "")
    assert isoformat_or_none("not a date") is None
