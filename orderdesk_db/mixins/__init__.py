"""Database mixins for modular database operations."""
from __future__ import annotations

from .customers import CustomerMixin
from .orders import OrderMixin
from .payments import PaymentMixin
from .restaurants import RestaurantMixin
from .riders import RiderMixin
from .tracking import TrackingMixin

__all__ = [
    "CustomerMixin",
    "OrderMixin",
    "PaymentMixin",
    "RestaurantMixin",
    "RiderMixin",
    "TrackingMixin",
]
