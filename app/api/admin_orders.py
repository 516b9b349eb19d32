"""
Admin order board endpoints.

List/filter/paginate enriched orders and run the operator actions: status
changes, payment confirmation and rider assignment. Every mutation triggers
a full reload of the restaurant's board.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query
from pydantic import BaseModel

from app.api.context import get_context, get_restaurant, reload_board, result_response
from app.application.orders.assign_rider import assign_rider
from app.application.orders.confirm_payment import set_payment_confirmation
from app.application.orders.update_status import (
    advance_order_status,
    cancel_order,
    update_order_status,
)
from app.core.exceptions import DatabaseException, InvalidStatusError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/orders", tags=["admin-orders"])


class StatusUpdateRequest(BaseModel):
    status: str


class PaymentConfirmationRequest(BaseModel):
    confirmed: bool


class RiderAssignmentRequest(BaseModel):
    rider_id: str


@router.get("")
async def list_orders(
    authorization: str = Header(None),
    status: Optional[str] = Query("all"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    view_key: Optional[str] = Query(None),
):
    """Page of enriched orders for the operator's restaurant.

    Filter, search and page come from the request. ``view_key`` is the key of
    the view the client last rendered; page goes back to 1 when the data or
    the query changed since.
    """
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    board = ctx.boards.get(restaurant.id)

    if not board.loaded:
        try:
            await board.refresh()
        except DatabaseException as e:
            raise HTTPException(status_code=503, detail="Failed to load orders") from e

    try:
        view = board.view(status, search, page, seen_key=view_key)
    except InvalidStatusError as e:
        raise HTTPException(status_code=400, detail=e.message) from e

    body = view.to_dict(currency=restaurant.restaurant_currency)
    body["is_payment_overdue"] = restaurant.is_payment_overdue
    return body


@router.post("/refresh")
async def refresh_orders(authorization: str = Header(None)):
    """Manual reload; joins a reload that is already running."""
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    board = ctx.boards.get(restaurant.id)
    try:
        orders = await board.refresh()
    except DatabaseException as e:
        return result_response(False, "Failed to load orders", "db_error", detail=e.message)
    return result_response(True, "Orders refreshed", total_orders=len(orders))


@router.post("/{order_id}/viewed")
async def mark_order_viewed(order_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    cleared = ctx.boards.get(restaurant.id).mark_viewed(order_id)
    return {"success": True, "order_id": order_id, "cleared": cleared}


@router.post("/{order_id}/status")
async def set_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    authorization: str = Header(None),
):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await update_order_status(
        order_id,
        payload.status,
        repo=ctx.orders_repo,
        restaurant=restaurant,
        enforce_forward=ctx.settings.board.enforce_forward_transitions,
    )
    if result.ok:
        await reload_board(ctx, restaurant.id)
    return result_response(
        result.ok,
        result.message,
        result.error_key,
        order_id=order_id,
        status=result.status,
        previous_status=result.previous_status,
    )


@router.post("/{order_id}/next")
async def advance_order(order_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await advance_order_status(
        order_id,
        repo=ctx.orders_repo,
        restaurant=restaurant,
        enforce_forward=ctx.settings.board.enforce_forward_transitions,
    )
    if result.ok:
        await reload_board(ctx, restaurant.id)
    return result_response(
        result.ok,
        result.message,
        result.error_key,
        order_id=order_id,
        status=result.status,
        previous_status=result.previous_status,
    )


@router.post("/{order_id}/cancel")
async def cancel(order_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await cancel_order(
        order_id,
        repo=ctx.orders_repo,
        restaurant=restaurant,
        enforce_forward=ctx.settings.board.enforce_forward_transitions,
    )
    if result.ok:
        await reload_board(ctx, restaurant.id)
    return result_response(
        result.ok,
        result.message,
        result.error_key,
        order_id=order_id,
        status=result.status,
        previous_status=result.previous_status,
    )


@router.post("/{order_id}/payment")
async def set_payment(
    order_id: str,
    payload: PaymentConfirmationRequest,
    authorization: str = Header(None),
):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await set_payment_confirmation(
        order_id,
        payload.confirmed,
        repo=ctx.orders_repo,
        restaurant_id=restaurant.id,
    )
    if result.ok:
        await reload_board(ctx, restaurant.id)
    return result_response(
        result.ok,
        result.message,
        result.error_key,
        order_id=order_id,
        payment_confirmed=result.payment_confirmed,
    )


@router.post("/{order_id}/rider")
async def set_rider(
    order_id: str,
    payload: RiderAssignmentRequest,
    authorization: str = Header(None),
):
    """Assign a rider and return the share link for the rider page."""
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    board_settings = ctx.settings.board
    result = await assign_rider(
        order_id,
        payload.rider_id,
        repo=ctx.orders_repo,
        restaurant=restaurant,
        public_origin=board_settings.public_origin,
        ttl_hours=board_settings.rider_token_ttl_hours,
        revoke_stale=board_settings.revoke_stale_rider_tokens,
    )
    if result.ok:
        await reload_board(ctx, restaurant.id)
    return result_response(
        result.ok,
        result.message,
        result.error_key,
        order_id=order_id,
        rider_id=payload.rider_id,
        rider_link=result.rider_link,
        expires_at=result.token.expires_at if result.token else None,
    )
