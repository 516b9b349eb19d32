"""
Database schema initialization.
"""
from __future__ import annotations

try:
    from logging_config import logger
except ImportError:
    import logging
    logger = logging.getLogger(__name__)

ORDER_STATUSES = (
    "PENDING",
    "CONFIRMED",
    "PREPARING",
    "READY_FOR_DELIVERY",
    "DISPATCHED",
    "OUT_FOR_DELIVERY",
    "DELIVERED",
    "CANCELLED",
    "RETURNED",
)


def _status_check(column: str, values: tuple[str, ...]) -> str:
    allowed = ", ".join(f"'{value}'" for value in values)
    return f"CHECK ({column} IN ({allowed}))"


class SchemaMixin:
    """Mixin for database schema initialization."""

    def init_db(self):
        """Initialize PostgreSQL database schema."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            # Restaurants table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS restaurants (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    owner_id TEXT NOT NULL UNIQUE,
                    slug TEXT NOT NULL UNIQUE,
                    status TEXT DEFAULT 'ACTIVE',
                    is_payment_overdue BOOLEAN DEFAULT FALSE,
                    restaurant_currency TEXT DEFAULT 'USD',
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Customers table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS customers (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    name TEXT NOT NULL,
                    email TEXT,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Delivery riders table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS delivery_riders (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    restaurant_id TEXT NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    phone TEXT NOT NULL,
                    email TEXT,
                    is_active BOOLEAN DEFAULT TRUE,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Orders table
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS orders (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    restaurant_id TEXT NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
                    customer_id TEXT REFERENCES customers(id) ON DELETE SET NULL,
                    phone_number TEXT NOT NULL,
                    delivery_address TEXT NOT NULL DEFAULT '',
                    delivery_notes TEXT,
                    total_amount NUMERIC(12, 2) NOT NULL DEFAULT 0,
                    delivery_fee NUMERIC(12, 2) NOT NULL DEFAULT 0,
                    payment_method TEXT DEFAULT 'COD'
                        CHECK (payment_method IN ('COD', 'BANK_TRANSFER')),
                    payment_confirmed BOOLEAN DEFAULT FALSE,
                    status TEXT NOT NULL DEFAULT 'PENDING' {_status_check("status", ORDER_STATUSES)},
                    is_self_pickup BOOLEAN DEFAULT FALSE,
                    assigned_rider_id TEXT REFERENCES delivery_riders(id) ON DELETE SET NULL,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Order items table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS order_items (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    order_id TEXT NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
                    item_name TEXT NOT NULL,
                    quantity INTEGER NOT NULL CHECK (quantity > 0),
                    price NUMERIC(12, 2) NOT NULL DEFAULT 0,
                    item_type TEXT DEFAULT 'REGULAR' CHECK (item_type IN ('REGULAR', 'BUNDLE')),
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Order tracking tokens table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS order_tracking_tokens (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    order_id TEXT NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
                    token TEXT NOT NULL UNIQUE,
                    token_type TEXT NOT NULL CHECK (token_type IN ('RIDER', 'CUSTOMER')),
                    expires_at TIMESTAMPTZ NOT NULL,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Subscription tiers table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS subscription_tiers (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    name TEXT NOT NULL,
                    monthly_price NUMERIC(12, 2) NOT NULL DEFAULT 0
                )
            ''')

            # Payment invoices table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS payment_invoices (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    restaurant_id TEXT NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
                    tier_id TEXT REFERENCES subscription_tiers(id),
                    invoice_number TEXT NOT NULL,
                    amount NUMERIC(12, 2) NOT NULL,
                    currency TEXT NOT NULL DEFAULT 'USD',
                    status TEXT NOT NULL DEFAULT 'PENDING'
                        CHECK (status IN ('PENDING', 'SUBMITTED', 'APPROVED', 'REJECTED')),
                    invoice_type TEXT NOT NULL,
                    payment_receipt_url TEXT,
                    rejection_reason TEXT,
                    submission_date TIMESTAMPTZ,
                    review_date TIMESTAMPTZ,
                    due_date TIMESTAMPTZ,
                    billing_period_start TIMESTAMPTZ,
                    billing_period_end TIMESTAMPTZ,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Payment receipts table
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS payment_receipts (
                    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
                    restaurant_id TEXT NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
                    subscription_tier_id TEXT REFERENCES subscription_tiers(id),
                    amount NUMERIC(12, 2) NOT NULL,
                    currency TEXT NOT NULL DEFAULT 'USD',
                    status TEXT NOT NULL DEFAULT 'PENDING'
                        CHECK (status IN ('PENDING', 'APPROVED', 'REJECTED')),
                    transaction_type TEXT,
                    receipt_image_url TEXT,
                    notes TEXT,
                    submitted_at TIMESTAMPTZ,
                    reviewed_at TIMESTAMPTZ,
                    created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute('CREATE INDEX IF NOT EXISTS idx_orders_restaurant ON orders(restaurant_id, created_at DESC)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_orders_customer ON orders(customer_id, restaurant_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_order_items_order ON order_items(order_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_riders_restaurant ON delivery_riders(restaurant_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_tracking_tokens_order ON order_tracking_tokens(order_id, token_type, created_at DESC)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_invoices_restaurant ON payment_invoices(restaurant_id)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_receipts_restaurant ON payment_receipts(restaurant_id)')

            logger.info("Database schema initialized")
