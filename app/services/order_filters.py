"""Status filter, search and pagination for the order board."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from app.core.exceptions import InvalidStatusError
from app.domain.order import EnrichedOrder, OrderStatus
from app.domain.order_fsm import TERMINAL_STATUSES

T = TypeVar("T")

PAGE_SIZE = 10
MAX_PAGE_BUTTONS = 5

FILTER_ALL = "all"
FILTER_ACTIVE = "active"
FILTER_NEW = "new"
STATUS_FILTERS: tuple[str, ...] = (FILTER_ALL, FILTER_ACTIVE, FILTER_NEW) + tuple(
    s.value for s in OrderStatus
)

# Statuses shown as quick-filter chips above the list.
QUICK_STAT_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_DELIVERY,
    OrderStatus.OUT_FOR_DELIVERY,
)


def normalize_status_filter(value: str | None) -> str:
    """Map a raw query value to a known filter; unknown values raise."""
    raw = (value or FILTER_ALL).strip()
    if raw.lower() in (FILTER_ALL, FILTER_ACTIVE, FILTER_NEW):
        return raw.lower()
    return OrderStatus.parse(raw).value


def matches_status(order: EnrichedOrder, status_filter: str) -> bool:
    if status_filter == FILTER_ALL:
        return True
    if status_filter == FILTER_ACTIVE:
        return order.status not in TERMINAL_STATUSES
    if status_filter == FILTER_NEW:
        return order.status == OrderStatus.PENDING
    return order.status.value == status_filter


def matches_search(order: EnrichedOrder, term: str) -> bool:
    needle = term.lower()
    haystack = (
        order.order.phone_number,
        order.order_id,
        order.order.delivery_address,
        order.customer_name,
    )
    return any(needle in (value or "").lower() for value in haystack)


def filter_orders(
    orders: Sequence[EnrichedOrder],
    status_filter: str | None = FILTER_ALL,
    search: str | None = None,
) -> list[EnrichedOrder]:
    """Apply status filter then case-insensitive search; order is preserved."""
    try:
        normalized = normalize_status_filter(status_filter)
    except InvalidStatusError:
        raise InvalidStatusError(status_filter, kind="filter") from None

    term = (search or "").strip()
    return [
        order
        for order in orders
        if matches_status(order, normalized) and (not term or matches_search(order, term))
    ]


@dataclass
class PageResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total: int = 0
    start: int = 0
    end: int = 0

    @property
    def range_text(self) -> str:
        """Range line under the list; bounds are 1-based and inclusive."""
        if not self.total:
            return "Showing 0 of 0 orders"
        return f"Showing {self.start + 1}-{self.end} of {self.total} orders"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages_for(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count else 0


def paginate(items: Sequence[T], page: int = 1, page_size: int = PAGE_SIZE) -> PageResult[T]:
    """Slice ``[(page-1)*size, page*size)``; page is clamped into range."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    total = len(items)
    total_pages = total_pages_for(total, page_size)
    page = min(max(int(page or 1), 1), max(total_pages, 1))
    start = (page - 1) * page_size
    end = min(start + page_size, total)
    return PageResult(
        items=list(items[start:end]),
        page=page,
        total_pages=total_pages,
        total=total,
        start=start if total else 0,
        end=end,
    )


def page_window(current: int, total_pages: int, size: int = MAX_PAGE_BUTTONS) -> list[int]:
    """Page numbers to render: at most ``size``, centred on ``current``, sliding at the ends."""
    if total_pages <= 0:
        return []
    count = min(size, total_pages)
    if total_pages <= size:
        first = 1
    elif current <= size // 2 + 1:
        first = 1
    elif current >= total_pages - size // 2:
        first = total_pages - size + 1
    else:
        first = current - size // 2
    return [first + i for i in range(count)]


def status_counts(orders: Sequence[EnrichedOrder]) -> dict[str, int]:
    """Quick-stat counts over the unfiltered list; zero counts are omitted."""
    counts: dict[str, int] = {}
    for status in QUICK_STAT_STATUSES:
        count = sum(1 for o in orders if o.status == status)
        if count:
            counts[status.value] = count
    return counts
