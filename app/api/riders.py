"""Admin delivery rider management endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query
from pydantic import BaseModel

from app.api.context import get_context, get_restaurant, result_response
from app.core.exceptions import RiderNotFoundException

router = APIRouter(prefix="/api/admin/riders", tags=["admin-riders"])


class RiderPayload(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None


@router.get("")
async def list_riders(
    authorization: str = Header(None),
    active_only: bool = Query(False),
):
    """All riders newest first, or active riders by name for the assignment dropdown."""
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    riders = await ctx.riders.list_riders(restaurant.id, active_only=active_only)
    return {"riders": [r.to_dict() for r in riders], "total": len(riders)}


@router.get("/{rider_id}")
async def get_rider(rider_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    try:
        rider = await ctx.riders.require_rider(restaurant.id, rider_id)
    except RiderNotFoundException as e:
        raise HTTPException(status_code=404, detail="Rider not found") from e
    return rider.to_dict()


@router.post("")
async def create_rider(payload: RiderPayload, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await ctx.riders.create_rider(
        restaurant.id, name=payload.name, phone=payload.phone, email=payload.email
    )
    return result_response(
        result.ok,
        "Rider added" if result.ok else result.message,
        result.error_key,
        rider=result.rider.to_dict() if result.rider else None,
    )


@router.put("/{rider_id}")
async def update_rider(rider_id: str, payload: RiderPayload, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await ctx.riders.update_rider(
        restaurant.id, rider_id, name=payload.name, phone=payload.phone, email=payload.email
    )
    return result_response(
        result.ok,
        "Rider updated" if result.ok else result.message,
        result.error_key,
        rider=result.rider.to_dict() if result.rider else None,
    )


@router.post("/{rider_id}/toggle")
async def toggle_rider(rider_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await ctx.riders.toggle_active(restaurant.id, rider_id)
    message = None
    if result.ok:
        message = "Rider activated" if result.rider.is_active else "Rider deactivated"
    return result_response(
        result.ok,
        message or result.message,
        result.error_key,
        rider=result.rider.to_dict() if result.rider else None,
    )


@router.delete("/{rider_id}")
async def delete_rider(rider_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    result = await ctx.riders.delete_rider(restaurant.id, rider_id)
    return result_response(
        result.ok,
        "Rider deleted" if result.ok else result.message,
        result.error_key,
        rider_id=rider_id,
    )
