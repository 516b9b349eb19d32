"""Rider and customer tracking tokens: generation, share links, lookup."""
from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from app.core.utils import utc_now
from app.domain.entities import TrackingToken
from app.domain.order import TokenType
from app.infra.db.orders_repo import OrdersRepository

logger = logging.getLogger(__name__)

TOKEN_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_SUFFIX_LENGTH = 9
DEFAULT_RIDER_TOKEN_TTL_HOURS = 24

_LINK_PATHS = {
    TokenType.RIDER: "rider",
    TokenType.CUSTOMER: "track",
}

INVALID_LINK_MESSAGES = {
    TokenType.RIDER: "Invalid delivery link",
    TokenType.CUSTOMER: "Invalid tracking link",
}
EXPIRED_LINK_MESSAGES = {
    TokenType.RIDER: "Link Expired",
    TokenType.CUSTOMER: "Tracking Link Expired",
}


def generate_rider_token(order_id: str, *, now: datetime | None = None) -> str:
    """Build ``<orderId>-rider-<epochMillis>-<9 base36 chars>``."""
    moment = now or utc_now()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(secrets.choice(TOKEN_SUFFIX_ALPHABET) for _ in range(TOKEN_SUFFIX_LENGTH))
    return f"{order_id}-rider-{millis}-{suffix}"


def build_link(origin: str, token: str, token_type: TokenType | str) -> str:
    path = _LINK_PATHS[TokenType(token_type)]
    return f"{origin.rstrip('/')}/{path}/{token}"


def build_rider_link(origin: str, token: str) -> str:
    return build_link(origin, token, TokenType.RIDER)


def build_customer_link(origin: str, token: str) -> str:
    return build_link(origin, token, TokenType.CUSTOMER)


def token_from_row(row: Any) -> TrackingToken:
    return TrackingToken.model_validate(row)


async def issue_rider_token(
    repo: OrdersRepository,
    order_id: str,
    rider_id: str,
    restaurant_id: str,
    *,
    ttl_hours: int = DEFAULT_RIDER_TOKEN_TTL_HOURS,
    revoke_stale: bool = True,
    now: datetime | None = None,
) -> TrackingToken | None:
    """Attach a rider and store a fresh RIDER token in one store transaction.

    Older RIDER tokens are expired when ``revoke_stale`` is set. Returns None
    when the order does not belong to the restaurant; nothing is written then
    or when the store fails.
    """
    moment = now or utc_now()
    row = await repo.assign_rider_with_token(
        order_id,
        rider_id,
        restaurant_id,
        generate_rider_token(order_id, now=moment),
        moment + timedelta(hours=ttl_hours),
        moment if revoke_stale else None,
    )
    if row is None:
        return None
    logger.info("Issued rider token for order %s", order_id)
    return token_from_row(row)


@dataclass
class TokenResolution:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    token: TrackingToken | None = None
    order: dict | None = None


async def resolve_token(
    repo: OrdersRepository,
    token: str,
    token_type: TokenType,
    *,
    now: datetime | None = None,
) -> TokenResolution:
    """Look up a token and its order; reports invalid/expired links."""
    row = await repo.get_token(token, token_type.value)
    if not row:
        return TokenResolution(False, "invalid_link", INVALID_LINK_MESSAGES[token_type])

    tracking = token_from_row(row)
    moment = now or utc_now()
    if tracking.is_expired(moment):
        return TokenResolution(
            False, "expired", EXPIRED_LINK_MESSAGES[token_type], token=tracking
        )

    order = await repo.get_order(tracking.order_id)
    if not order:
        return TokenResolution(
            False, "not_found", INVALID_LINK_MESSAGES[token_type], token=tracking
        )
    return TokenResolution(True, token=tracking, order=order)
