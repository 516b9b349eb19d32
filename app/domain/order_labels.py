"""Shared status label helpers for the order board and payment views."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.core.exceptions import InvalidStatusError
from app.domain.order import InvoiceStatus, InvoiceType, OrderStatus, ReceiptStatus


@dataclass(frozen=True, slots=True)
class StatusDisplay:
    label: str
    icon: str
    color: str
    bg: str

    def to_dict(self) -> dict:
        return {"label": self.label, "icon": self.icon, "color": self.color, "bg": self.bg}


_BOARD_DISPLAY: dict[OrderStatus, StatusDisplay] = {
    OrderStatus.PENDING: StatusDisplay("Pending", "clock", "text-yellow-600", "bg-yellow-50 border-yellow-200"),
    OrderStatus.CONFIRMED: StatusDisplay("Confirmed", "check-circle", "text-blue-600", "bg-blue-50 border-blue-200"),
    OrderStatus.PREPARING: StatusDisplay("Preparing", "chef-hat", "text-orange-600", "bg-orange-50 border-orange-200"),
    OrderStatus.READY_FOR_DELIVERY: StatusDisplay(
        "Ready for Delivery", "package", "text-purple-600", "bg-purple-50 border-purple-200"
    ),
    OrderStatus.DISPATCHED: StatusDisplay(
        "Dispatched (Rider Assigned)", "truck", "text-indigo-600", "bg-indigo-50 border-indigo-200"
    ),
    OrderStatus.OUT_FOR_DELIVERY: StatusDisplay(
        "Out for Delivery", "truck", "text-blue-700", "bg-blue-100 border-blue-300"
    ),
    OrderStatus.DELIVERED: StatusDisplay("Delivered", "home", "text-green-600", "bg-green-50 border-green-200"),
    OrderStatus.CANCELLED: StatusDisplay("Cancelled", "x-circle", "text-red-600", "bg-red-50 border-red-200"),
    OrderStatus.RETURNED: StatusDisplay("Returned", "alert-triangle", "text-gray-600", "bg-gray-50 border-gray-200"),
}

# Wording shown on the customer tracking page.
_TRACKING_DISPLAY: dict[OrderStatus, StatusDisplay] = {
    OrderStatus.PENDING: StatusDisplay("Order Received", "clock", "text-yellow-600", "bg-yellow-100"),
    OrderStatus.CONFIRMED: StatusDisplay("Order Confirmed", "check-circle", "text-blue-600", "bg-blue-100"),
    OrderStatus.PREPARING: StatusDisplay("Preparing Your Order", "package", "text-orange-600", "bg-orange-100"),
    OrderStatus.READY_FOR_DELIVERY: StatusDisplay("Ready for Pickup", "package", "text-purple-600", "bg-purple-100"),
    OrderStatus.DISPATCHED: StatusDisplay("Order Dispatched", "truck", "text-indigo-600", "bg-indigo-100"),
    OrderStatus.OUT_FOR_DELIVERY: StatusDisplay("Out for Delivery", "truck", "text-blue-600", "bg-blue-100"),
    OrderStatus.DELIVERED: StatusDisplay("Delivered", "home", "text-green-600", "bg-green-100"),
    OrderStatus.CANCELLED: StatusDisplay("Cancelled", "x-circle", "text-red-600", "bg-red-100"),
    OrderStatus.RETURNED: StatusDisplay("Returned", "alert-circle", "text-gray-600", "bg-gray-100"),
}


def status_display(status: Any) -> StatusDisplay:
    """Return board label/icon/colors for a status; unknown values raise."""
    return _BOARD_DISPLAY[OrderStatus.parse(status)]


def tracking_status_display(status: Any) -> StatusDisplay:
    return _TRACKING_DISPLAY[OrderStatus.parse(status)]


# Badge tone per payment review status.
NEUTRAL = "neutral"
POSITIVE = "positive"
NEGATIVE = "negative"


@dataclass(frozen=True, slots=True)
class PaymentBadge:
    label: str
    tone: str

    def to_dict(self) -> dict:
        return {"label": self.label, "tone": self.tone}


_INVOICE_BADGES: dict[InvoiceStatus, PaymentBadge] = {
    InvoiceStatus.PENDING: PaymentBadge("Pending Payment", NEUTRAL),
    InvoiceStatus.SUBMITTED: PaymentBadge("Under Review", NEUTRAL),
    InvoiceStatus.APPROVED: PaymentBadge("Approved", POSITIVE),
    InvoiceStatus.REJECTED: PaymentBadge("Rejected", NEGATIVE),
}

_RECEIPT_BADGES: dict[ReceiptStatus, PaymentBadge] = {
    ReceiptStatus.PENDING: PaymentBadge("Pending Review", NEUTRAL),
    ReceiptStatus.APPROVED: PaymentBadge("Approved", POSITIVE),
    ReceiptStatus.REJECTED: PaymentBadge("Rejected", NEGATIVE),
}

_INVOICE_TYPE_LABELS: dict[str, str] = {
    InvoiceType.TRIAL_CONVERSION.value: "Trial Conversion",
    InvoiceType.UPGRADE.value: "Plan Upgrade",
    InvoiceType.RENEWAL.value: "Plan Renewal",
}


def invoice_badge(status: Any) -> PaymentBadge:
    try:
        return _INVOICE_BADGES[InvoiceStatus(str(status).strip().upper())]
    except ValueError:
        raise InvalidStatusError(status, kind="invoice") from None


def receipt_badge(status: Any) -> PaymentBadge:
    try:
        return _RECEIPT_BADGES[ReceiptStatus(str(status).strip().upper())]
    except ValueError:
        raise InvalidStatusError(status, kind="receipt") from None


def invoice_type_label(invoice_type: str | None) -> str:
    """Human label for an invoice type; unknown types pass through unchanged."""
    if not invoice_type:
        return ""
    return _INVOICE_TYPE_LABELS.get(invoice_type, invoice_type)
