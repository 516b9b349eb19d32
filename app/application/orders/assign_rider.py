"""Use case: assign a delivery rider and issue the rider's share link."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from app.domain.entities import Restaurant, TrackingToken
from app.domain.order_fsm import is_terminal
from app.services.tracking_tokens import (
    DEFAULT_RIDER_TOKEN_TTL_HOURS,
    build_rider_link,
    issue_rider_token,
)

logger = logging.getLogger(__name__)

ASSIGN_FAILED_MESSAGE = "Failed to assign rider. Please try again."


def rider_assigned_message(rider_name: str) -> str:
    return f"Rider {rider_name} assigned successfully!"


@dataclass
class RiderAssignmentResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    rider_link: str | None = None
    token: TrackingToken | None = None
    rider: Any | None = None


async def assign_rider(
    order_id: str,
    rider_id: str,
    *,
    repo: Any,
    restaurant: Restaurant,
    public_origin: str,
    ttl_hours: int = DEFAULT_RIDER_TOKEN_TTL_HOURS,
    revoke_stale: bool = True,
    now: datetime | None = None,
) -> RiderAssignmentResult:
    """Attach a rider to a delivery order and return ``<origin>/rider/<token>``.

    The order's status is left unchanged.
    """
    try:
        order = await repo.get_order(order_id, restaurant.id)
        rider = await repo.get_rider(rider_id, restaurant.id)
    except Exception as e:
        logger.error(f"Failed to load order {order_id} / rider {rider_id}: {e}")
        return RiderAssignmentResult(False, "db_error", ASSIGN_FAILED_MESSAGE)

    if not order:
        return RiderAssignmentResult(False, "not_found", "Order not found.")
    if repo.get_field(order, "is_self_pickup", False):
        return RiderAssignmentResult(
            False, "self_pickup", "Self-pickup orders do not need a rider."
        )
    if is_terminal(repo.get_field(order, "status")):
        return RiderAssignmentResult(
            False, "order_closed", "Cannot assign a rider to a closed order."
        )
    if not rider:
        return RiderAssignmentResult(False, "rider_not_found", "Rider not found.")
    if not repo.get_field(rider, "is_active", False):
        return RiderAssignmentResult(False, "rider_inactive", "Rider is not active.", rider=rider)

    try:
        token = await issue_rider_token(
            repo,
            order_id,
            rider_id,
            restaurant.id,
            ttl_hours=ttl_hours,
            revoke_stale=revoke_stale,
            now=now,
        )
    except Exception as e:
        logger.error(f"Error assigning rider {rider_id} to order {order_id}: {e}")
        return RiderAssignmentResult(False, "db_error", ASSIGN_FAILED_MESSAGE, rider=rider)
    if token is None:
        return RiderAssignmentResult(False, "not_found", "Order not found.")

    rider_name = repo.get_field(rider, "name", "")
    logger.info(f"Rider {rider_id} assigned to order {order_id}")
    return RiderAssignmentResult(
        True,
        message=rider_assigned_message(rider_name),
        rider_link=build_rider_link(public_origin, token.token),
        token=token,
        rider=rider,
    )
