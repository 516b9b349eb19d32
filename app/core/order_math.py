"""Shared helpers for order totals and money formatting."""
from __future__ import annotations

from typing import Any

CURRENCY_SYMBOLS: dict[str, str] = {
    "AED": "د.إ",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "NPR": "रू",
}


def currency_symbol(currency: str | None) -> str:
    code = (currency or "").strip().upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_currency(amount: Any, currency: str | None = "AED") -> str:
    try:
        value = float(amount or 0)
    except (TypeError, ValueError):
        value = 0.0
    return f"{currency_symbol(currency)}{value:.2f}"


def calc_items_total(items: list[dict]) -> float:
    total = 0.0
    for item in items:
        try:
            price = float(item.get("price") or 0)
        except (TypeError, ValueError):
            price = 0.0
        try:
            qty = int(item.get("quantity") or 0)
        except (TypeError, ValueError):
            qty = 0
        total += price * qty
    return total


def calc_subtotal(total_amount: Any, delivery_fee: Any) -> float:
    """Order total without the delivery fee."""
    try:
        total = float(total_amount or 0)
    except (TypeError, ValueError):
        total = 0.0
    try:
        fee = float(delivery_fee or 0)
    except (TypeError, ValueError):
        fee = 0.0
    return total - fee


def items_count_label(count: int) -> str:
    return f"{count} item" if count == 1 else f"{count} items"
