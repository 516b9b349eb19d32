"""
Owner authentication for the admin API.

Owners send ``Authorization: Bearer <token>`` where the token is
``<owner_id>.<expires_epoch>.<hex hmac-sha256>`` signed with
``ORDERDESK_AUTH_SECRET`` by the identity front end. In development
``dev_<owner_id>`` is accepted as well.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import time

from fastapi import HTTPException

from app.core.config import Settings
from app.core.exceptions import AuthorizationException

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_SECONDS = 12 * 3600


def _signature(secret: str, payload: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def sign_owner_token(
    owner_id: str,
    secret: str,
    *,
    ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    now: float | None = None,
) -> str:
    expires = int((now if now is not None else time.time()) + ttl_seconds)
    payload = f"{owner_id}.{expires}"
    return f"{payload}.{_signature(secret, payload)}"


def verify_owner_token(token: str, secret: str, *, now: float | None = None) -> str:
    """Return the owner id of a valid token; raise AuthorizationException otherwise."""
    if not secret:
        raise AuthorizationException("Auth secret not configured")
    try:
        owner_id, expires_raw, signature = token.rsplit(".", 2)
        expires = int(expires_raw)
    except ValueError:
        raise AuthorizationException("Malformed token") from None

    expected = _signature(secret, f"{owner_id}.{expires_raw}")
    if not owner_id or not hmac.compare_digest(expected, signature):
        raise AuthorizationException("Invalid signature")
    if expires < (now if now is not None else time.time()):
        raise AuthorizationException("Token expired")
    return owner_id


def verify_owner(authorization: str | None, settings: Settings) -> str:
    """
    Verify the Authorization header and return the owner id.
    Supports:
    1. Signed bearer tokens
    2. Dev mode bypass for local development
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing authorization")

    # Development mode bypass - ONLY works in non-production environment
    if authorization.startswith("dev_"):
        if not settings.is_dev:
            raise HTTPException(status_code=401, detail="Dev auth not allowed in production")
        owner_id = authorization[len("dev_"):].strip()
        if not owner_id:
            raise HTTPException(status_code=401, detail="Invalid dev auth format")
        return owner_id

    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")

    try:
        return verify_owner_token(authorization[len("Bearer "):].strip(), settings.auth_secret)
    except AuthorizationException as e:
        logger.warning(f"Rejected owner token: {e.message}")
        raise HTTPException(status_code=401, detail=f"Auth failed: {e.message}") from e
