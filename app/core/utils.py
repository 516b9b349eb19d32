"""Shared helper utilities reused across services and routes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping


def utc_now() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def get_field(row: Any, field_name: str, default: Any = None) -> Any:
    """Safely get a column from a dict-like row or an attribute object."""
    if row is None:
        return default
    if isinstance(row, Mapping):
        return row.get(field_name, default)
    if hasattr(row, "get"):
        try:
            return row.get(field_name, default)
        except (KeyError, TypeError):
            pass
    return getattr(row, field_name, default)


def parse_datetime(value: Any) -> datetime | None:
    """Parse DB/ISO timestamps into aware datetimes (naive values are UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def isoformat_or_none(value: Any) -> str | None:
    moment = parse_datetime(value)
    return moment.isoformat() if moment else None


def format_order_timestamp(value: Any) -> tuple[str, str]:
    """Split a timestamp into ("Mon, Jan 5, 2026", "03:04 PM") for order cards."""
    moment = parse_datetime(value)
    if not moment:
        return "", ""
    date_part = f"{moment:%a}, {moment:%b} {moment.day}, {moment.year}"
    time_part = moment.strftime("%I:%M %p")
    return date_part, time_part
