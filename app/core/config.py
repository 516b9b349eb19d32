"""Environment-driven configuration objects for the order desk."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from app.core.exceptions import ConfigurationException

DEV_ENVIRONMENTS = frozenset({"development", "dev", "local", "test"})


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationException(f"{name} must be an integer, got {raw!r}") from e


@dataclass(slots=True)
class DatabaseConfig:
    url: str | None
    min_connections: int = 1
    max_connections: int = 5
    pool_wait_timeout: int = 60


@dataclass(slots=True)
class OrderBoardConfig:
    public_origin: str = "http://localhost:5173"
    poll_interval_seconds: int = 30
    page_size: int = 10
    rider_token_ttl_hours: int = 24
    enforce_forward_transitions: bool = True
    revoke_stale_rider_tokens: bool = True


@dataclass(slots=True)
class Settings:
    environment: str
    database: DatabaseConfig
    board: OrderBoardConfig = field(default_factory=OrderBoardConfig)
    auth_secret: str = ""
    port: int = 8000
    log_level: str = "INFO"

    @property
    def is_dev(self) -> bool:
        return self.environment in DEV_ENVIRONMENTS

    @property
    def database_url(self) -> str | None:
        """Alias kept for call sites that only need the DSN."""
        return self.database.url


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    environment = os.getenv("ENVIRONMENT", "production").strip().lower()

    database = DatabaseConfig(
        url=os.getenv("DATABASE_URL") or None,
        min_connections=_int_env("DB_MIN_CONN", 1),
        max_connections=_int_env("DB_MAX_CONN", 5),
        pool_wait_timeout=_int_env("DB_POOL_WAIT_TIMEOUT", 60),
    )

    board = OrderBoardConfig(
        public_origin=os.getenv("ORDERDESK_PUBLIC_ORIGIN", "http://localhost:5173").rstrip("/"),
        poll_interval_seconds=_int_env("ORDERDESK_POLL_INTERVAL_SECONDS", 30),
        page_size=_int_env("ORDERDESK_PAGE_SIZE", 10),
        rider_token_ttl_hours=_int_env("ORDERDESK_RIDER_TOKEN_TTL_HOURS", 24),
        enforce_forward_transitions=_str_to_bool(
            os.getenv("ORDERDESK_ENFORCE_FORWARD_TRANSITIONS"), default=True
        ),
        revoke_stale_rider_tokens=_str_to_bool(
            os.getenv("ORDERDESK_REVOKE_STALE_RIDER_TOKENS"), default=True
        ),
    )
    if board.page_size <= 0:
        raise ConfigurationException("ORDERDESK_PAGE_SIZE must be positive")
    if board.poll_interval_seconds <= 0:
        raise ConfigurationException("ORDERDESK_POLL_INTERVAL_SECONDS must be positive")

    auth_secret = os.getenv("ORDERDESK_AUTH_SECRET", "")
    if not auth_secret and environment not in DEV_ENVIRONMENTS:
        raise ConfigurationException("ORDERDESK_AUTH_SECRET environment variable is not set")

    return Settings(
        environment=environment,
        database=database,
        board=board,
        auth_secret=auth_secret,
        port=_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
