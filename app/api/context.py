"""Shared API wiring: services built around one store, plus route helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.auth import verify_owner
from app.core.async_db import AsyncDBProxy
from app.core.config import Settings
from app.core.exceptions import DatabaseException, RestaurantNotFoundException
from app.core.sentry_integration import set_restaurant_context
from app.domain.entities import Restaurant
from app.infra.db.orders_repo import OrdersRepository
from app.infra.db.payments_repo import PaymentsRepository
from app.infra.db.riders_repo import RidersRepository
from app.services.order_enrichment import OrderEnrichmentService
from app.services.order_poller import BoardRegistry
from app.services.payment_history import PaymentHistoryService
from app.services.rider_service import RiderService
from app.services.tracking_views import TrackingViewService
from database_protocol import DatabaseProtocol

logger = logging.getLogger(__name__)

# error_key -> HTTP status for failed use case results
ERROR_STATUS_CODES: dict[str, int] = {
    "not_found": 404,
    "rider_not_found": 404,
    "invalid_link": 404,
    "expired": 410,
    "payment_overdue": 403,
    "invalid_transition": 409,
    "order_closed": 409,
    "self_pickup": 409,
    "rider_inactive": 409,
    "invalid": 422,
    "db_error": 500,
}


@dataclass
class ApiContext:
    settings: Settings
    db: AsyncDBProxy
    orders_repo: OrdersRepository
    boards: BoardRegistry
    payment_history: PaymentHistoryService
    riders: RiderService
    tracking_views: TrackingViewService


def build_context(db: DatabaseProtocol, settings: Settings, *, polling: bool = True) -> ApiContext:
    proxy = AsyncDBProxy(db)
    orders_repo = OrdersRepository(proxy)
    enrichment = OrderEnrichmentService(orders_repo, public_origin=settings.board.public_origin)
    return ApiContext(
        settings=settings,
        db=proxy,
        orders_repo=orders_repo,
        boards=BoardRegistry(
            enrichment,
            page_size=settings.board.page_size,
            poll_interval=settings.board.poll_interval_seconds,
            polling=polling,
        ),
        payment_history=PaymentHistoryService(PaymentsRepository(proxy)),
        riders=RiderService(RidersRepository(proxy)),
        tracking_views=TrackingViewService(orders_repo),
    )


# Global context (set by api_server.py)
_ctx: ApiContext | None = None


def set_orders_db(db: DatabaseProtocol, settings: Settings, *, polling: bool = True) -> ApiContext:
    """Build services around ``db`` and make them available to the routers."""
    global _ctx
    _ctx = build_context(db, settings, polling=polling)
    return _ctx


def set_api_context(ctx: ApiContext | None) -> None:
    global _ctx
    _ctx = ctx


def get_context() -> ApiContext:
    if _ctx is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return _ctx


async def get_restaurant(authorization: str | None, ctx: ApiContext) -> Restaurant:
    """Authenticate the owner and load their restaurant."""
    owner_id = verify_owner(authorization, ctx.settings)
    try:
        row = await ctx.orders_repo.get_restaurant_by_owner_or_raise(owner_id)
    except RestaurantNotFoundException as e:
        raise HTTPException(status_code=403, detail="No restaurant found for this account") from e
    except Exception as e:
        logger.error(f"Failed to load restaurant for owner {owner_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to load restaurant") from e
    restaurant = Restaurant.model_validate(row)
    set_restaurant_context(restaurant.id, slug=restaurant.slug)
    return restaurant


def result_response(
    ok: bool,
    message: str | None,
    error_key: str | None = None,
    **extra: Any,
) -> JSONResponse:
    """``{"success", "message", ...}`` body with a status derived from ``error_key``."""
    body: dict[str, Any] = {"success": ok, "message": message or ""}
    if error_key:
        body["error"] = error_key
    body.update(extra)
    status_code = 200 if ok else ERROR_STATUS_CODES.get(error_key or "", 400)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def reload_board(ctx: ApiContext, restaurant_id: str) -> None:
    """Reload an already open board after a mutation."""
    if restaurant_id not in ctx.boards:
        return
    try:
        await ctx.boards.get(restaurant_id).refresh(force=True)
    except DatabaseException:
        # board keeps the previous list and exposes last_error
        logger.warning(f"Board reload after mutation failed for restaurant {restaurant_id}")
