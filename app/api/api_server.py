"""
FastAPI server for the order desk.

Serves the admin order board, rider management, payment history and the
public rider/customer tracking endpoints.
"""
from __future__ import annotations

import asyncio
import logging
import os
import urllib.parse
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.admin_orders import router as admin_orders_router
from app.api.context import set_api_context, set_orders_db
from app.api.payments import router as payments_router
from app.api.rate_limit import build_limiter
from app.api.riders import router as riders_router
from app.api.tracking import router as tracking_router
from app.core.config import Settings, load_settings
from app.core.sentry_integration import init_sentry
from database_protocol import DatabaseProtocol
from logging_config import setup_logging

logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
]


def _origin_from_url(value: str | None) -> str | None:
    if not value:
        return None
    try:
        parsed = urllib.parse.urlsplit(value.strip())
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return f"{parsed.scheme}://{parsed.netloc}"


def allowed_origins(settings: Settings) -> list[str]:
    origins: list[str] = []
    candidates = [settings.board.public_origin]
    candidates.extend(os.getenv("CORS_ALLOWED_ORIGINS", "").split(","))
    for raw in candidates:
        origin = _origin_from_url(raw)
        if origin and origin not in origins:
            origins.append(origin)
    if settings.is_dev:
        origins.extend(o for o in DEV_ORIGINS if o not in origins)
    return origins


def create_api_app(
    db: DatabaseProtocol | None = None,
    settings: Settings | None = None,
    *,
    polling: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        db: Store implementing DatabaseProtocol; routes answer 500 without one
        settings: Loaded settings (read from the environment when omitted)
        polling: Start a background poller per open order board
    """
    settings = settings or load_settings()
    ctx = set_orders_db(db, settings, polling=polling) if db is not None else None
    if ctx is None:
        set_api_context(None)
    else:
        logger.info("Database connected to API")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Order desk API starting...")
        if ctx is not None:
            ctx.boards.start()
        yield
        logger.info("Order desk API shutting down...")
        if ctx is not None:
            await ctx.boards.stop()

    app = FastAPI(
        title="Order Desk API",
        description="Restaurant order management back end",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    app.state.limiter = build_limiter()
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Sentry-Trace", "Baggage"],
        expose_headers=["Content-Length", "Content-Type"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith(("/api/rider/", "/api/track/")):
            # share links must never be served from a cache
            response.headers["Cache-Control"] = "no-store, max-age=0"
        return response

    app.include_router(admin_orders_router)
    app.include_router(riders_router)
    app.include_router(payments_router)
    app.include_router(tracking_router)

    @app.get("/")
    async def root():
        return {"service": "Order Desk API", "version": "1.0.0", "docs": "/api/docs"}

    @app.get("/health")
    async def health():
        return {"status": "ok", "database": ctx is not None}

    return app


async def run_api_server(
    db: DatabaseProtocol | None = None,
    settings: Settings | None = None,
    host: str = "0.0.0.0",
    port: int | None = None,
):
    """Run the API under uvicorn inside the current event loop."""
    settings = settings or load_settings()
    app = create_api_app(db, settings)

    config = uvicorn.Config(
        app,
        host=host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
    server = uvicorn.Server(config)

    logger.info(f"Starting order desk API on http://{host}:{config.port}")
    await server.serve()


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    init_sentry(os.getenv("SENTRY_DSN"), environment=settings.environment)

    from orderdesk_db import Database

    db = Database(
        settings.database_url,
        min_connections=settings.database.min_connections,
        max_connections=settings.database.max_connections,
        pool_wait_timeout=settings.database.pool_wait_timeout,
    )
    try:
        asyncio.run(run_api_server(db, settings))
    finally:
        db.close()


if __name__ == "__main__":
    main()
