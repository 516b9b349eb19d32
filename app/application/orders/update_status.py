"""Use case: move an order to another lifecycle status."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.domain.entities import Restaurant
from app.domain.order import OrderStatus
from app.domain.order_fsm import next_status, validate_order_transition

logger = logging.getLogger(__name__)

STATUS_UPDATED_MESSAGE = "Order status updated successfully!"
STATUS_UPDATE_FAILED_MESSAGE = "Failed to update order status."
PAYMENT_OVERDUE_MESSAGE = "Cannot process orders. Your subscription payment is overdue."
ORDER_NOT_FOUND_MESSAGE = "Order not found."


@dataclass
class StatusUpdateResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    order: Any | None = None
    previous_status: str | None = None
    status: str | None = None


async def update_order_status(
    order_id: str,
    new_status: Any,
    *,
    repo: Any,
    restaurant: Restaurant | None = None,
    enforce_forward: bool = True,
) -> StatusUpdateResult:
    """Validate and persist a status change.

    With a ``restaurant`` the change is scoped to it and refused while its
    subscription payment is overdue.
    """
    if not repo:
        return StatusUpdateResult(False, "db_error", STATUS_UPDATE_FAILED_MESSAGE)

    if restaurant is not None and restaurant.is_payment_overdue:
        return StatusUpdateResult(False, "payment_overdue", PAYMENT_OVERDUE_MESSAGE)

    restaurant_id = restaurant.id if restaurant is not None else None
    try:
        order = await repo.get_order(order_id, restaurant_id)
    except Exception as e:
        logger.error(f"Failed to load order {order_id}: {e}")
        return StatusUpdateResult(False, "db_error", STATUS_UPDATE_FAILED_MESSAGE)
    if not order:
        return StatusUpdateResult(False, "not_found", ORDER_NOT_FOUND_MESSAGE)

    current_status = repo.get_field(order, "status")
    validation = validate_order_transition(
        current_status=current_status,
        target_status=new_status,
        enforce_forward=enforce_forward,
    )
    if not validation.allowed:
        return StatusUpdateResult(
            False,
            "invalid_transition",
            validation.reason,
            order=order,
            previous_status=current_status,
        )

    target = OrderStatus.parse(new_status)
    try:
        updated = await repo.set_order_status(order_id, target.value, restaurant_id)
    except Exception as e:
        logger.error(f"Error updating status of order {order_id}: {e}")
        return StatusUpdateResult(
            False, "db_error", STATUS_UPDATE_FAILED_MESSAGE, order=order, previous_status=current_status
        )
    if not updated:
        return StatusUpdateResult(False, "not_found", ORDER_NOT_FOUND_MESSAGE, order=order)

    logger.info(f"Order {order_id}: {current_status} -> {target.value}")
    return StatusUpdateResult(
        True,
        message=STATUS_UPDATED_MESSAGE,
        order=order,
        previous_status=current_status,
        status=target.value,
    )


async def advance_order_status(
    order_id: str,
    *,
    repo: Any,
    restaurant: Restaurant | None = None,
    enforce_forward: bool = True,
) -> StatusUpdateResult:
    """Move an order one step along the main sequence."""
    if restaurant is not None and restaurant.is_payment_overdue:
        return StatusUpdateResult(False, "payment_overdue", PAYMENT_OVERDUE_MESSAGE)

    restaurant_id = restaurant.id if restaurant is not None else None
    try:
        order = await repo.get_order(order_id, restaurant_id)
    except Exception as e:
        logger.error(f"Failed to load order {order_id}: {e}")
        return StatusUpdateResult(False, "db_error", STATUS_UPDATE_FAILED_MESSAGE)
    if not order:
        return StatusUpdateResult(False, "not_found", ORDER_NOT_FOUND_MESSAGE)

    upcoming = next_status(repo.get_field(order, "status"))
    if upcoming is None:
        return StatusUpdateResult(
            False,
            "invalid_transition",
            "Order is already in a final status.",
            order=order,
            previous_status=repo.get_field(order, "status"),
        )
    return await update_order_status(
        order_id,
        upcoming,
        repo=repo,
        restaurant=restaurant,
        enforce_forward=enforce_forward,
    )


async def cancel_order(
    order_id: str,
    *,
    repo: Any,
    restaurant: Restaurant | None = None,
    enforce_forward: bool = True,
) -> StatusUpdateResult:
    return await update_order_status(
        order_id,
        OrderStatus.CANCELLED,
        repo=repo,
        restaurant=restaurant,
        enforce_forward=enforce_forward,
    )
