from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address


def _rate_limit_storage_uri() -> str | None:
    return os.getenv("RATE_LIMIT_STORAGE_URI") or None


def _get_client_ip(request: Request) -> str:
    """Resolve client IP with proxy headers support."""
    xff = request.headers.get("X-Forwarded-For")
    if xff:
        parts = [part.strip() for part in xff.split(",") if part.strip()]
        if parts:
            return parts[0]

    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    return get_remote_address(request)


def _default_limits() -> list[str]:
    if os.getenv("RATE_LIMIT_DISABLED", "").strip().lower() in {"1", "true", "yes"}:
        return []
    return [os.getenv("RATE_LIMIT_DEFAULT", "100/minute")]


def build_limiter() -> Limiter:
    """Limiter keyed by client IP; in-memory unless a storage URI is configured."""
    storage = _rate_limit_storage_uri()
    if storage:
        return Limiter(key_func=_get_client_ip, default_limits=_default_limits(), storage_uri=storage)
    return Limiter(key_func=_get_client_ip, default_limits=_default_limits())


__all__ = ["build_limiter"]
