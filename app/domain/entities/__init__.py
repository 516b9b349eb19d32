"""Domain entities package."""

from .order_item import OrderItem
from .payment import PaymentInvoice, PaymentReceipt, SubscriptionTier
from .restaurant import Restaurant
from .rider import Rider
from .tracking_token import TrackingToken

__all__ = [
    "OrderItem",
    "PaymentInvoice",
    "PaymentReceipt",
    "Restaurant",
    "Rider",
    "SubscriptionTier",
    "TrackingToken",
]
