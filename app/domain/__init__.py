"""Domain package."""

from .entities import (
    OrderItem,
    PaymentInvoice,
    PaymentReceipt,
    Restaurant,
    Rider,
    SubscriptionTier,
    TrackingToken,
)
from .order import (
    EnrichedOrder,
    InvoiceStatus,
    InvoiceType,
    OrderItemType,
    OrderSnapshot,
    OrderStatus,
    PaymentMethod,
    ReceiptStatus,
    TokenType,
)

__all__ = [
    # Entities
    "OrderItem",
    "PaymentInvoice",
    "PaymentReceipt",
    "Restaurant",
    "Rider",
    "SubscriptionTier",
    "TrackingToken",
    # Value types
    "EnrichedOrder",
    "InvoiceStatus",
    "InvoiceType",
    "OrderItemType",
    "OrderSnapshot",
    "OrderStatus",
    "PaymentMethod",
    "ReceiptStatus",
    "TokenType",
]
