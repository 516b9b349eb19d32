"""Order status transition rules (single source of truth)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.core.exceptions import InvalidStatusError
from app.domain.order import OrderStatus

MAIN_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_DELIVERY,
    OrderStatus.DISPATCHED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset(
    {
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
        OrderStatus.RETURNED,
    }
)

# Side branches reachable from any non-terminal status.
SIDE_BRANCH_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.RETURNED})

# Orders the board treats as finished when flagging new arrivals.
CLOSED_FOR_NEW_FLAG = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


@dataclass(frozen=True, slots=True)
class TransitionValidationResult:
    allowed: bool
    reason: str | None = None


def is_terminal(status: Any) -> bool:
    return OrderStatus.parse(status) in TERMINAL_STATUSES


def next_status(status: Any) -> OrderStatus | None:
    """Return the status right after ``status`` in the main sequence."""
    current = OrderStatus.parse(status)
    if current in TERMINAL_STATUSES:
        return None
    index = MAIN_SEQUENCE.index(current)
    return MAIN_SEQUENCE[index + 1]


def available_statuses(status: Any) -> list[OrderStatus]:
    """All forward main-sequence statuses after ``status``; empty when terminal."""
    current = OrderStatus.parse(status)
    if current in TERMINAL_STATUSES:
        return []
    index = MAIN_SEQUENCE.index(current)
    return list(MAIN_SEQUENCE[index + 1 :])


def validate_order_transition(
    *,
    current_status: Any,
    target_status: Any,
    enforce_forward: bool = True,
) -> TransitionValidationResult:
    """Validate terminal guard and, when enforced, forward-only movement."""
    if target_status is None or str(target_status).strip() == "":
        return TransitionValidationResult(False, "New status is not specified.")

    try:
        target = OrderStatus.parse(target_status)
    except InvalidStatusError:
        return TransitionValidationResult(False, f"Unsupported status: {target_status}")

    try:
        current = OrderStatus.parse(current_status)
    except InvalidStatusError:
        return TransitionValidationResult(False, f"Unsupported current status: {current_status}")

    if current == target:
        return TransitionValidationResult(True)

    if current in TERMINAL_STATUSES:
        return TransitionValidationResult(
            False,
            f"Cannot change terminal status '{current.value}'.",
        )

    if not enforce_forward:
        return TransitionValidationResult(True)

    if target in SIDE_BRANCH_STATUSES:
        return TransitionValidationResult(True)

    if target not in available_statuses(current):
        return TransitionValidationResult(
            False,
            f"Transition '{current.value} -> {target.value}' is not allowed.",
        )

    return TransitionValidationResult(True)


def payment_confirmation_allowed(status: Any, confirmed: bool) -> TransitionValidationResult:
    """Payment can be unconfirmed at any time but not confirmed once terminal."""
    if confirmed and is_terminal(status):
        return TransitionValidationResult(
            False,
            "Cannot confirm payment for delivered/cancelled orders.",
        )
    return TransitionValidationResult(True)


def progress_percent(status: Any) -> float:
    """Share of the main sequence reached; 0 for side-branch statuses."""
    current = OrderStatus.parse(status)
    if current not in MAIN_SEQUENCE:
        return 0.0
    return (MAIN_SEQUENCE.index(current) + 1) / len(MAIN_SEQUENCE) * 100
