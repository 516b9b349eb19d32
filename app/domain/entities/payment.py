"""Subscription payment entity models (invoices and receipts)."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.order import InvoiceStatus, ReceiptStatus


class SubscriptionTier(BaseModel):
    name: str
    monthly_price: float = 0

    class Config:
        """Pydantic config."""

        from_attributes = True


class PaymentInvoice(BaseModel):
    """Billing invoice issued to a restaurant."""

    id: str
    invoice_number: str = ""
    amount: float
    currency: str
    status: InvoiceStatus
    invoice_type: str | None = None
    tier: SubscriptionTier | None = None
    payment_receipt_url: str | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None
    submission_date: datetime | None = None
    review_date: datetime | None = None
    due_date: datetime | None = None
    billing_period_start: datetime | None = None
    billing_period_end: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
        use_enum_values = True


class PaymentReceipt(BaseModel):
    """Payment proof uploaded by a restaurant."""

    id: str
    amount: float
    currency: str
    status: ReceiptStatus
    subscription_tier_id: str | None = None
    tier: SubscriptionTier | None = None
    transaction_type: str | None = None
    receipt_image_url: str | None = None
    notes: str | None = Field(None, description="Admin notes")
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    created_at: datetime | None = None

    class Config:
        """Pydantic config."""

        from_attributes = True
        use_enum_values = True
