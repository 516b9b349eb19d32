"""Owner token auth and settings loading."""
from __future__ import annotations

import pytest
from fastapi import HTTPException

from app.api.auth import sign_owner_token, verify_owner, verify_owner_token
from app.core.config import DatabaseConfig, Settings, load_settings
from app.core.exceptions import AuthorizationException, ConfigurationException

SECRET = "s3cret"
NOW = 1_760_000_000


def _settings(environment: str = "production") -> Settings:
    return Settings(environment=environment, database=DatabaseConfig(url=None), auth_secret=SECRET)


def test_signed_token_roundtrip():
    token = sign_owner_token("owner-1", SECRET, ttl_seconds=60, now=NOW)

    assert verify_owner_token(token, SECRET, now=NOW + 30) == "owner-1"


def test_token_with_dots_in_owner_id():
    token = sign_owner_token("auth0|a.b", SECRET, now=NOW)

    assert verify_owner_token(token, SECRET, now=NOW) == "auth0|a.b"


@pytest.mark.parametrize(
    "token, reason",
    [
        ("garbage", "Malformed token"),
        ("owner-1.notanumber.abc", "Malformed token"),
        ("owner-1.9999999999.deadbeef", "Invalid signature"),
    ],
)
def test_bad_tokens_are_rejected(token, reason):
    with pytest.raises(AuthorizationException) as exc:
        verify_owner_token(token, SECRET, now=NOW)
    assert exc.value.message == reason


def test_expired_token_is_rejected():
    token = sign_owner_token("owner-1", SECRET, ttl_seconds=60, now=NOW)

    with pytest.raises(AuthorizationException, match="expired"):
        verify_owner_token(token, SECRET, now=NOW + 61)


def test_token_signed_with_other_secret_is_rejected():
    token = sign_owner_token("owner-1", "other", now=NOW)

    with pytest.raises(AuthorizationException):
        verify_owner_token(token, SECRET, now=NOW)


def test_verify_owner_bearer_header():
    token = sign_owner_token("owner-1", SECRET)

    assert verify_owner(f"Bearer {token}", _settings()) == "owner-1"


def test_verify_owner_missing_header():
    with pytest.raises(HTTPException) as exc:
        verify_owner(None, _settings())
    assert exc.value.status_code == 401


def test_dev_bypass_only_in_dev():
    assert verify_owner("dev_owner-1", _settings("development")) == "owner-1"

    with pytest.raises(HTTPException) as exc:
        verify_owner("dev_owner-1", _settings("production"))
    assert exc.value.status_code == 401


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "Production")
    monkeypatch.setenv("ORDERDESK_AUTH_SECRET", "abc")
    monkeypatch.setenv("ORDERDESK_PUBLIC_ORIGIN", "https://desk.example.com/")
    monkeypatch.setenv("ORDERDESK_PAGE_SIZE", "25")
    monkeypatch.setenv("ORDERDESK_ENFORCE_FORWARD_TRANSITIONS", "false")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost/orders")

    settings = load_settings()

    assert settings.environment == "production"
    assert not settings.is_dev
    assert settings.board.public_origin == "https://desk.example.com"
    assert settings.board.page_size == 25
    assert settings.board.enforce_forward_transitions is False
    assert settings.board.revoke_stale_rider_tokens is True
    assert settings.database_url == "postgresql://u:p@localhost/orders"


def test_load_settings_requires_secret_in_production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ORDERDESK_AUTH_SECRET", "")

    with pytest.raises(ConfigurationException, match="ORDERDESK_AUTH_SECRET"):
        load_settings()


def test_load_settings_rejects_bad_integers(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ORDERDESK_POLL_INTERVAL_SECONDS", "soon")

    with pytest.raises(ConfigurationException, match="must be an integer"):
        load_settings()


def test_load_settings_rejects_non_positive_page_size(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("ORDERDESK_PAGE_SIZE", "0")

    with pytest.raises(ConfigurationException, match="ORDERDESK_PAGE_SIZE"):
        load_settings()
