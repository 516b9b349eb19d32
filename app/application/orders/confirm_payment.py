"""Use case: confirm or unconfirm payment for an order."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.domain.order_fsm import payment_confirmation_allowed

logger = logging.getLogger(__name__)

PAYMENT_UPDATE_FAILED_MESSAGE = "Failed to update payment confirmation."


def payment_updated_message(confirmed: bool) -> str:
    return f"Payment {'confirmed' if confirmed else 'unconfirmed'} successfully!"


@dataclass
class PaymentDecisionResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    order: Any | None = None
    payment_confirmed: bool | None = None


async def set_payment_confirmation(
    order_id: str,
    confirmed: bool,
    *,
    repo: Any,
    restaurant_id: str | None = None,
) -> PaymentDecisionResult:
    if not repo:
        return PaymentDecisionResult(False, "db_error", PAYMENT_UPDATE_FAILED_MESSAGE)

    try:
        order = await repo.get_order(order_id, restaurant_id)
    except Exception as e:
        logger.error(f"Failed to load order {order_id}: {e}")
        return PaymentDecisionResult(False, "db_error", PAYMENT_UPDATE_FAILED_MESSAGE)
    if not order:
        return PaymentDecisionResult(False, "not_found", "Order not found.")

    check = payment_confirmation_allowed(repo.get_field(order, "status"), confirmed)
    if not check.allowed:
        return PaymentDecisionResult(
            False,
            "order_closed",
            check.reason,
            order=order,
            payment_confirmed=bool(repo.get_field(order, "payment_confirmed", False)),
        )

    try:
        updated = await repo.set_payment_confirmed(order_id, confirmed, restaurant_id)
    except Exception as e:
        logger.error(f"Error updating payment confirmation of order {order_id}: {e}")
        return PaymentDecisionResult(False, "db_error", PAYMENT_UPDATE_FAILED_MESSAGE, order=order)
    if not updated:
        return PaymentDecisionResult(False, "not_found", "Order not found.", order=order)

    return PaymentDecisionResult(
        True,
        message=payment_updated_message(confirmed),
        order=order,
        payment_confirmed=confirmed,
    )
