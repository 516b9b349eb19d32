"""Business services orchestrating domain logic."""

from .order_board import BoardView, OrderBoard
from .order_enrichment import NewOrderTracker, OrderEnrichmentService
from .order_poller import BoardRegistry, OrderPoller
from .payment_history import PaymentHistoryService
from .rider_service import RiderService
from .tracking_views import TrackingViewService

__all__ = [
    "BoardRegistry",
    "BoardView",
    "NewOrderTracker",
    "OrderBoard",
    "OrderEnrichmentService",
    "OrderPoller",
    "PaymentHistoryService",
    "RiderService",
    "TrackingViewService",
]
