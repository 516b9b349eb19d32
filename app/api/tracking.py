"""Public tracking endpoints reached through share links (no owner auth)."""
from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from app.api.context import get_context, result_response

router = APIRouter(prefix="/api", tags=["tracking"])


class RiderStatusRequest(BaseModel):
    status: str


class RiderPaymentRequest(BaseModel):
    confirmed: bool


@router.get("/track/{token}")
async def track_order(token: str):
    """Customer tracking page data."""
    ctx = get_context()
    view = await ctx.tracking_views.customer_view(token)
    return result_response(view.ok, view.message, view.error_key, order=view.data or None)


@router.get("/rider/{token}")
async def rider_delivery(token: str):
    """Rider delivery page data: order, items and available actions."""
    ctx = get_context()
    view = await ctx.tracking_views.rider_view(token)
    return result_response(view.ok, view.message, view.error_key, order=view.data or None)


@router.post("/rider/{token}/status")
async def rider_status(token: str, payload: RiderStatusRequest):
    ctx = get_context()
    view = await ctx.tracking_views.rider_update_status(token, payload.status)
    return result_response(view.ok, view.message, view.error_key, order=view.data or None)


@router.post("/rider/{token}/payment")
async def rider_payment(token: str, payload: RiderPaymentRequest):
    ctx = get_context()
    view = await ctx.tracking_views.rider_update_payment(token, payload.confirmed)
    return result_response(view.ok, view.message, view.error_key, order=view.data or None)
