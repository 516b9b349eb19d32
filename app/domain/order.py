"""Order domain types and status enums."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from app.core.exceptions import InvalidStatusError

if TYPE_CHECKING:
    from app.domain.entities import OrderItem


class OrderStatus(str, Enum):
    """Delivery lifecycle statuses stored in orders.status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY_FOR_DELIVERY = "READY_FOR_DELIVERY"
    DISPATCHED = "DISPATCHED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"

    @classmethod
    def parse(cls, status: Any) -> "OrderStatus":
        """Coerce a raw value into an OrderStatus, raising on unknown values."""
        if isinstance(status, cls):
            return status
        try:
            return cls(str(status).strip().upper())
        except ValueError:
            raise InvalidStatusError(status) from None


class PaymentMethod(str, Enum):
    COD = "COD"
    BANK_TRANSFER = "BANK_TRANSFER"


class OrderItemType(str, Enum):
    REGULAR = "REGULAR"
    BUNDLE = "BUNDLE"


class TokenType(str, Enum):
    """Audience of an order tracking token."""

    RIDER = "RIDER"
    CUSTOMER = "CUSTOMER"


class InvoiceStatus(str, Enum):
    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReceiptStatus(str, Enum):
    """Receipt review status; receipts have no SUBMITTED stage."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InvoiceType(str, Enum):
    TRIAL_CONVERSION = "TRIAL_CONVERSION"
    UPGRADE = "UPGRADE"
    RENEWAL = "RENEWAL"


@dataclass(frozen=True)
class OrderSnapshot:
    """Read-only view of an orders row, independent of the row format."""

    order_id: str
    restaurant_id: str | None
    status: OrderStatus
    phone_number: str
    delivery_address: str
    delivery_notes: str | None
    total_amount: float
    delivery_fee: float
    payment_method: str | None
    payment_confirmed: bool
    is_self_pickup: bool
    assigned_rider_id: str | None
    customer_id: str | None
    created_at: datetime | None

    @property
    def subtotal(self) -> float:
        return self.total_amount - (self.delivery_fee or 0)

    @classmethod
    def from_row(
        cls,
        row: Any,
        *,
        get_field: Callable[[Any, str, Any], Any],
    ) -> "OrderSnapshot":
        return cls(
            order_id=str(get_field(row, "id", "")),
            restaurant_id=get_field(row, "restaurant_id", None),
            status=OrderStatus.parse(get_field(row, "status", None)),
            phone_number=get_field(row, "phone_number", "") or "",
            delivery_address=get_field(row, "delivery_address", "") or "",
            delivery_notes=get_field(row, "delivery_notes", None),
            total_amount=float(get_field(row, "total_amount", 0) or 0),
            delivery_fee=float(get_field(row, "delivery_fee", 0) or 0),
            payment_method=get_field(row, "payment_method", None),
            payment_confirmed=bool(get_field(row, "payment_confirmed", False)),
            is_self_pickup=bool(get_field(row, "is_self_pickup", False)),
            assigned_rider_id=get_field(row, "assigned_rider_id", None),
            customer_id=get_field(row, "customer_id", None),
            created_at=get_field(row, "created_at", None),
        )


@dataclass
class EnrichedOrder:
    """An order plus the related data the board shows next to it."""

    order: OrderSnapshot
    items: list[OrderItem] = field(default_factory=list)
    customer_name: str = "Customer"
    customer_email: str = ""
    customer_order_count: int = 0
    is_new_customer: bool = True
    rider_link: str | None = None
    customer_link: str | None = None

    @property
    def order_id(self) -> str:
        return self.order.order_id

    @property
    def status(self) -> OrderStatus:
        return self.order.status
