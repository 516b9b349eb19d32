"""Public token-based pages: customer order tracking and rider delivery."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from app.application.orders.confirm_payment import set_payment_confirmation
from app.application.orders.update_status import update_order_status
from app.core.order_math import format_currency
from app.core.utils import format_order_timestamp, get_field, isoformat_or_none
from app.domain.entities import OrderItem
from app.domain.order import OrderSnapshot, OrderStatus, TokenType
from app.domain.order_fsm import progress_percent
from app.domain.order_labels import status_display, tracking_status_display
from app.infra.db.orders_repo import OrdersRepository
from app.services.tracking_tokens import resolve_token

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load order details"
RIDER_STATUS_UPDATED_MESSAGE = "Order status updated successfully!"
RIDER_STATUS_FAILED_MESSAGE = "Failed to update order status"
RIDER_PAYMENT_FAILED_MESSAGE = "Failed to update payment status"

# (target status, button label) offered to the rider per current status.
RIDER_ACTIONS: dict[OrderStatus, tuple[tuple[OrderStatus, str], ...]] = {
    OrderStatus.DISPATCHED: ((OrderStatus.OUT_FOR_DELIVERY, "Mark Out for Delivery"),),
    OrderStatus.OUT_FOR_DELIVERY: (
        (OrderStatus.DELIVERED, "Mark as Delivered"),
        (OrderStatus.RETURNED, "Return Order"),
    ),
}


def rider_actions(status: Any) -> list[dict]:
    current = OrderStatus.parse(status)
    return [{"status": target.value, "label": label} for target, label in RIDER_ACTIONS.get(current, ())]


def rider_payment_message(confirmed: bool) -> str:
    return f"Payment {'confirmed' if confirmed else 'marked as pending'}!"


@dataclass
class TrackingViewResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    data: dict = field(default_factory=dict)


def _order_summary(order: OrderSnapshot, currency: str) -> dict:
    created_date, created_time = format_order_timestamp(order.created_at)
    return {
        "id": order.order_id,
        "status": order.status.value,
        "phone_number": order.phone_number,
        "delivery_address": order.delivery_address,
        "delivery_notes": order.delivery_notes,
        "is_self_pickup": order.is_self_pickup,
        "payment_method": order.payment_method,
        "payment_confirmed": order.payment_confirmed,
        "total_amount": order.total_amount,
        "delivery_fee": order.delivery_fee,
        "subtotal": order.subtotal,
        "total_display": format_currency(order.total_amount, currency),
        "created_at": isoformat_or_none(order.created_at),
        "created_date": created_date,
        "created_time": created_time,
    }


class TrackingViewService:
    def __init__(self, repo: OrdersRepository, *, currency: str = "AED"):
        self.repo = repo
        self.currency = currency

    async def _resolve(self, token: str, token_type: TokenType) -> tuple[TrackingViewResult | None, OrderSnapshot | None]:
        try:
            resolution = await resolve_token(self.repo, token, token_type)
        except Exception as e:
            logger.error(f"Failed to resolve {token_type.value} token: {e}")
            return TrackingViewResult(False, "db_error", LOAD_FAILED_MESSAGE), None
        if not resolution.ok:
            return TrackingViewResult(False, resolution.error_key, resolution.message), None
        return None, OrderSnapshot.from_row(resolution.order, get_field=get_field)

    async def customer_view(self, token: str) -> TrackingViewResult:
        failure, order = await self._resolve(token, TokenType.CUSTOMER)
        if failure:
            return failure
        data = _order_summary(order, self.currency)
        data["status_display"] = tracking_status_display(order.status).to_dict()
        data["progress"] = progress_percent(order.status)
        return TrackingViewResult(True, data=data)

    async def rider_view(self, token: str) -> TrackingViewResult:
        failure, order = await self._resolve(token, TokenType.RIDER)
        if failure:
            return failure
        try:
            items = await self.repo.get_order_items(order.order_id)
        except Exception as e:
            logger.error(f"Failed to load items of order {order.order_id}: {e}")
            return TrackingViewResult(False, "db_error", LOAD_FAILED_MESSAGE)
        data = _order_summary(order, self.currency)
        data["status_display"] = status_display(order.status).to_dict()
        data["items"] = [OrderItem.model_validate(item).to_dict() for item in items]
        data["actions"] = rider_actions(order.status)
        return TrackingViewResult(True, data=data)

    async def rider_update_status(self, token: str, new_status: Any) -> TrackingViewResult:
        failure, order = await self._resolve(token, TokenType.RIDER)
        if failure:
            return failure

        allowed = {action["status"] for action in rider_actions(order.status)}
        if str(new_status or "").strip().upper() not in allowed:
            return TrackingViewResult(
                False,
                "invalid_transition",
                f"Riders cannot move an order from {order.status.value} to {new_status}.",
            )

        result = await update_order_status(order.order_id, new_status, repo=self.repo)
        if not result.ok:
            return TrackingViewResult(False, result.error_key, RIDER_STATUS_FAILED_MESSAGE)
        return await self._after_rider_action(token, RIDER_STATUS_UPDATED_MESSAGE)

    async def rider_update_payment(self, token: str, confirmed: bool) -> TrackingViewResult:
        failure, order = await self._resolve(token, TokenType.RIDER)
        if failure:
            return failure

        result = await set_payment_confirmation(order.order_id, confirmed, repo=self.repo)
        if not result.ok:
            message = result.message if result.error_key == "order_closed" else RIDER_PAYMENT_FAILED_MESSAGE
            return TrackingViewResult(False, result.error_key, message)
        return await self._after_rider_action(token, rider_payment_message(confirmed))

    async def _after_rider_action(self, token: str, message: str) -> TrackingViewResult:
        view = await self.rider_view(token)
        view.message = message if view.ok else view.message
        return view
