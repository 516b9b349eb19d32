"""
Main Database class combining all mixins.
"""
from __future__ import annotations

import os

from .core import DatabaseCore
from .mixins import (
    CustomerMixin,
    OrderMixin,
    PaymentMixin,
    RestaurantMixin,
    RiderMixin,
    TrackingMixin,
)
from .schema import SchemaMixin

try:
    from logging_config import logger
except ImportError:
    import logging

    logger = logging.getLogger(__name__)


class Database(
    DatabaseCore,
    SchemaMixin,
    RestaurantMixin,
    OrderMixin,
    CustomerMixin,
    RiderMixin,
    TrackingMixin,
    PaymentMixin,
):
    """
    PostgreSQL store for the order desk.

    Combines all database functionality through mixins:
    - RestaurantMixin: owner -> restaurant lookup
    - OrderMixin: orders, line items, customer order counts
    - CustomerMixin: customer name/email
    - RiderMixin: delivery rider CRUD
    - TrackingMixin: rider/customer tracking tokens
    - PaymentMixin: subscription invoice/receipt history
    """

    def __init__(self, database_url=None, **pool_options):
        """Initialize database with connection pool and schema."""
        super().__init__(database_url, **pool_options)
        # Skip init_db if SKIP_DB_INIT is set (for existing databases)
        if not os.getenv("SKIP_DB_INIT"):
            self.init_db()
            logger.info("Database initialized with all mixins")
        else:
            logger.info("Skipping database initialization (SKIP_DB_INIT=1)")
