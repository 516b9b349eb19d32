"""Shared pytest fixtures: in-memory store, settings and an optional PostgreSQL handle."""
from __future__ import annotations

import itertools
import os
from datetime import datetime, timedelta, timezone
from urllib.parse import urlparse

import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_DISABLED", "1")

from app.core.config import DatabaseConfig, OrderBoardConfig, Settings  # noqa: E402
from app.domain.entities import Restaurant  # noqa: E402
from app.infra.db.orders_repo import OrdersRepository  # noqa: E402

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
PUBLIC_ORIGIN = "https://desk.example.com"


class FakeStore:
    """Dict-backed store with the same method surface as ``orderdesk_db.Database``."""

    def __init__(self) -> None:
        self.restaurants: dict[str, dict] = {}
        self.orders: dict[str, dict] = {}
        self.items: list[dict] = []
        self.customers: dict[str, dict] = {}
        self.riders: dict[str, dict] = {}
        self.tokens: list[dict] = []
        self.invoices: list[dict] = []
        self.receipts: list[dict] = []
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self._ids = itertools.count(1)

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    # seeding helpers

    def add_restaurant(self, restaurant_id: str = "r1", owner_id: str = "owner-1", **fields) -> dict:
        row = {
            "id": restaurant_id,
            "owner_id": owner_id,
            "slug": restaurant_id,
            "status": "ACTIVE",
            "is_payment_overdue": False,
            "restaurant_currency": "AED",
        }
        row.update(fields)
        self.restaurants[restaurant_id] = row
        return row

    def add_order(self, order_id: str, restaurant_id: str = "r1", **fields) -> dict:
        row = {
            "id": order_id,
            "restaurant_id": restaurant_id,
            "customer_id": None,
            "phone_number": "+971500000000",
            "delivery_address": "1 Main St",
            "delivery_notes": None,
            "total_amount": 50.0,
            "delivery_fee": 5.0,
            "payment_method": "COD",
            "payment_confirmed": False,
            "status": "PENDING",
            "is_self_pickup": False,
            "assigned_rider_id": None,
            "created_at": BASE_TIME,
        }
        row.update(fields)
        self.orders[order_id] = row
        return row

    def add_item(self, order_id: str, item_name: str = "Burger", **fields) -> dict:
        row = {
            "id": f"item-{next(self._ids)}",
            "order_id": order_id,
            "item_name": item_name,
            "quantity": 1,
            "price": 10.0,
            "item_type": "REGULAR",
        }
        row.update(fields)
        self.items.append(row)
        return row

    def add_customer(self, customer_id: str, name: str = "Layla", email: str | None = None) -> dict:
        row = {"id": customer_id, "name": name, "email": email}
        self.customers[customer_id] = row
        return row

    def add_rider(self, rider_id: str, restaurant_id: str = "r1", **fields) -> dict:
        row = {
            "id": rider_id,
            "restaurant_id": restaurant_id,
            "name": "Omar",
            "phone": "+971501234567",
            "email": None,
            "is_active": True,
            "created_at": BASE_TIME,
        }
        row.update(fields)
        self.riders[rider_id] = row
        return row

    def add_token(
        self,
        order_id: str,
        token: str,
        token_type: str = "CUSTOMER",
        *,
        expires_at: datetime | None = None,
        created_at: datetime | None = None,
    ) -> dict:
        row = {
            "id": f"tok-{next(self._ids)}",
            "order_id": order_id,
            "token": token,
            "token_type": token_type,
            "expires_at": expires_at or datetime.now(timezone.utc) + timedelta(days=1),
            "created_at": created_at or datetime.now(timezone.utc),
        }
        self.tokens.append(row)
        return row

    # DatabaseProtocol surface

    def get_connection(self):
        raise NotImplementedError("FakeStore has no SQL connection")

    def close(self) -> None:
        self.calls.append("close")

    def get_restaurant_by_owner(self, owner_id: str):
        self._check("get_restaurant_by_owner")
        return next((dict(r) for r in self.restaurants.values() if r["owner_id"] == owner_id), None)

    def list_orders(self, restaurant_id: str):
        self._check("list_orders")
        rows = [dict(o) for o in self.orders.values() if o["restaurant_id"] == restaurant_id]
        return sorted(rows, key=lambda o: o["created_at"], reverse=True)

    def _scoped_order(self, order_id: str, restaurant_id: str | None):
        row = self.orders.get(order_id)
        if row is None or (restaurant_id is not None and row["restaurant_id"] != restaurant_id):
            return None
        return row

    def get_order(self, order_id: str, restaurant_id: str | None = None):
        self._check("get_order")
        row = self._scoped_order(order_id, restaurant_id)
        return dict(row) if row else None

    def update_order_status(self, order_id: str, status: str, restaurant_id: str | None = None) -> bool:
        self._check("update_order_status")
        row = self._scoped_order(order_id, restaurant_id)
        if row is None:
            return False
        row["status"] = status
        return True

    def update_payment_confirmed(
        self, order_id: str, confirmed: bool, restaurant_id: str | None = None
    ) -> bool:
        self._check("update_payment_confirmed")
        row = self._scoped_order(order_id, restaurant_id)
        if row is None:
            return False
        row["payment_confirmed"] = bool(confirmed)
        return True

    def get_order_items(self, order_id: str):
        self._check("get_order_items")
        return [dict(i) for i in self.items if i["order_id"] == order_id]

    def count_customer_orders(self, customer_id: str, restaurant_id: str) -> int:
        self._check("count_customer_orders")
        return sum(
            1
            for o in self.orders.values()
            if o["customer_id"] == customer_id and o["restaurant_id"] == restaurant_id
        )

    def get_customer(self, customer_id: str):
        self._check("get_customer")
        row = self.customers.get(customer_id)
        return dict(row) if row else None

    def list_riders(self, restaurant_id: str, active_only: bool = False):
        self._check("list_riders")
        rows = [dict(r) for r in self.riders.values() if r["restaurant_id"] == restaurant_id]
        if active_only:
            return sorted((r for r in rows if r["is_active"]), key=lambda r: r["name"])
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    def get_rider(self, rider_id: str, restaurant_id: str | None = None):
        self._check("get_rider")
        row = self.riders.get(rider_id)
        if row is None or (restaurant_id is not None and row["restaurant_id"] != restaurant_id):
            return None
        return dict(row)

    def create_rider(self, restaurant_id: str, name: str, phone: str, email: str | None = None):
        self._check("create_rider")
        rider_id = f"rider-{next(self._ids)}"
        return dict(
            self.add_rider(
                rider_id,
                restaurant_id,
                name=name,
                phone=phone,
                email=email,
                created_at=datetime.now(timezone.utc),
            )
        )

    def update_rider(
        self, rider_id: str, restaurant_id: str, name: str, phone: str, email: str | None = None
    ) -> bool:
        self._check("update_rider")
        row = self.riders.get(rider_id)
        if row is None or row["restaurant_id"] != restaurant_id:
            return False
        row.update(name=name, phone=phone, email=email)
        return True

    def set_rider_active(self, rider_id: str, restaurant_id: str, is_active: bool) -> bool:
        self._check("set_rider_active")
        row = self.riders.get(rider_id)
        if row is None or row["restaurant_id"] != restaurant_id:
            return False
        row["is_active"] = bool(is_active)
        return True

    def delete_rider(self, rider_id: str, restaurant_id: str) -> bool:
        self._check("delete_rider")
        row = self.riders.get(rider_id)
        if row is None or row["restaurant_id"] != restaurant_id:
            return False
        del self.riders[rider_id]
        for order in self.orders.values():
            if order["assigned_rider_id"] == rider_id:
                order["assigned_rider_id"] = None
        return True

    def get_latest_tracking_token(self, order_id: str, token_type: str):
        self._check("get_latest_tracking_token")
        rows = [t for t in self.tokens if t["order_id"] == order_id and t["token_type"] == token_type]
        if not rows:
            return None
        return dict(max(rows, key=lambda t: t["created_at"]))

    def get_tracking_token(self, token: str, token_type: str):
        self._check("get_tracking_token")
        return next(
            (dict(t) for t in self.tokens if t["token"] == token and t["token_type"] == token_type),
            None,
        )

    def assign_rider_with_token(
        self,
        order_id: str,
        rider_id: str,
        restaurant_id: str,
        token: str,
        expires_at: datetime,
        revoke_at: datetime | None = None,
    ):
        # every step is checked before anything is written, like a rolled back transaction
        self._check("assign_rider_with_token")
        self._check("set_assigned_rider")
        if revoke_at is not None:
            self._check("expire_tracking_tokens")
        self._check("create_tracking_token")
        row = self._scoped_order(order_id, restaurant_id)
        if row is None:
            return None
        row["assigned_rider_id"] = rider_id
        if revoke_at is not None:
            for existing in self.tokens:
                if (
                    existing["order_id"] == order_id
                    and existing["token_type"] == "RIDER"
                    and existing["expires_at"] > revoke_at
                ):
                    existing["expires_at"] = revoke_at
        return dict(self.add_token(order_id, token, "RIDER", expires_at=expires_at))

    def list_payment_invoices(self, restaurant_id: str):
        self._check("list_payment_invoices")
        rows = [dict(i) for i in self.invoices if i["restaurant_id"] == restaurant_id]
        return sorted(rows, key=lambda i: i["created_at"], reverse=True)

    def get_payment_invoice(self, invoice_id: str, restaurant_id: str):
        self._check("get_payment_invoice")
        return next(
            (dict(i) for i in self.invoices if i["id"] == invoice_id and i["restaurant_id"] == restaurant_id),
            None,
        )

    def list_payment_receipts(self, restaurant_id: str):
        self._check("list_payment_receipts")
        rows = [dict(r) for r in self.receipts if r["restaurant_id"] == restaurant_id]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    def get_payment_receipt(self, receipt_id: str, restaurant_id: str):
        self._check("get_payment_receipt")
        return next(
            (dict(r) for r in self.receipts if r["id"] == receipt_id and r["restaurant_id"] == restaurant_id),
            None,
        )


@pytest.fixture()
def store() -> FakeStore:
    """Store seeded with restaurant ``r1`` owned by ``owner-1``."""
    fake = FakeStore()
    fake.add_restaurant()
    return fake


@pytest.fixture()
def repo(store: FakeStore) -> OrdersRepository:
    return OrdersRepository(store)


@pytest.fixture()
def restaurant(store: FakeStore) -> Restaurant:
    return Restaurant.model_validate(store.restaurants["r1"])


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        database=DatabaseConfig(url=None),
        board=OrderBoardConfig(public_origin=PUBLIC_ORIGIN, poll_interval_seconds=30),
        auth_secret="test-secret",
    )


def _get_test_db_url() -> str | None:
    return os.getenv("TEST_DATABASE_URL")


def _is_safe_db_url(db_url: str) -> bool:
    """Allow only local/test hosts unless explicitly overridden."""
    host = (urlparse(db_url).hostname or "").lower()
    return host in {"localhost", "127.0.0.1", "postgres", "db"}


_TABLES = (
    "order_tracking_tokens",
    "order_items",
    "orders",
    "delivery_riders",
    "customers",
    "payment_receipts",
    "payment_invoices",
    "subscription_tiers",
    "restaurants",
)


@pytest.fixture(scope="session")
def postgres_db():
    """Session-scoped PostgreSQL store for tests."""
    db_url = _get_test_db_url()
    if not db_url:
        pytest.skip("TEST_DATABASE_URL is required for DB tests")
    if not _is_safe_db_url(db_url) and os.getenv("ALLOW_TEST_DB_RESET") != "1":
        pytest.skip(
            "Refusing to run DB tests against non-local database. "
            "Set ALLOW_TEST_DB_RESET=1 to override."
        )

    from orderdesk_db import Database

    db = Database(db_url, min_connections=1, max_connections=2)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def pg_store(postgres_db):
    """PostgreSQL store with empty tables."""
    with postgres_db.get_connection() as conn:
        conn.execute("TRUNCATE TABLE " + ", ".join(_TABLES) + " CASCADE")
    return postgres_db
