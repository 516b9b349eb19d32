"""Read-only subscription invoice and receipt history."""
from __future__ import annotations

import logging
from typing import Any

from app.core.exceptions import DatabaseException
from app.core.order_math import format_currency
from app.core.utils import get_field, isoformat_or_none
from app.domain.entities import PaymentInvoice, PaymentReceipt, SubscriptionTier
from app.domain.order_labels import invoice_badge, invoice_type_label, receipt_badge
from app.infra.db.payments_repo import PaymentsRepository

logger = logging.getLogger(__name__)


def _tier_from_row(row: Any) -> SubscriptionTier | None:
    name = get_field(row, "tier_name")
    if not name:
        return None
    return SubscriptionTier(name=name, monthly_price=float(get_field(row, "tier_monthly_price", 0) or 0))


def invoice_from_row(row: Any) -> PaymentInvoice:
    # Badge lookup first so unknown statuses raise InvalidStatusError.
    invoice_badge(get_field(row, "status"))
    data = dict(row)
    data["status"] = str(data["status"]).upper()
    data["amount"] = float(data.get("amount") or 0)
    data["tier"] = _tier_from_row(row)
    return PaymentInvoice.model_validate(data)


def receipt_from_row(row: Any) -> PaymentReceipt:
    receipt_badge(get_field(row, "status"))
    data = dict(row)
    data["status"] = str(data["status"]).upper()
    data["amount"] = float(data.get("amount") or 0)
    data["tier"] = _tier_from_row(row)
    return PaymentReceipt.model_validate(data)


def _tier_dict(tier: SubscriptionTier | None) -> dict | None:
    if tier is None:
        return None
    return {"name": tier.name, "monthly_price": tier.monthly_price}


def invoice_to_dict(invoice: PaymentInvoice) -> dict:
    return {
        "id": invoice.id,
        "invoice_number": invoice.invoice_number,
        "amount": invoice.amount,
        "amount_display": format_currency(invoice.amount, invoice.currency),
        "currency": invoice.currency,
        "status": invoice.status,
        "badge": invoice_badge(invoice.status).to_dict(),
        "invoice_type": invoice.invoice_type,
        "invoice_type_label": invoice_type_label(invoice.invoice_type),
        "tier": _tier_dict(invoice.tier),
        "payment_receipt_url": invoice.payment_receipt_url,
        "rejection_reason": invoice.rejection_reason,
        "created_at": isoformat_or_none(invoice.created_at),
        "submission_date": isoformat_or_none(invoice.submission_date),
        "review_date": isoformat_or_none(invoice.review_date),
        "due_date": isoformat_or_none(invoice.due_date),
        "billing_period_start": isoformat_or_none(invoice.billing_period_start),
        "billing_period_end": isoformat_or_none(invoice.billing_period_end),
    }


def receipt_to_dict(receipt: PaymentReceipt) -> dict:
    return {
        "id": receipt.id,
        "amount": receipt.amount,
        "amount_display": format_currency(receipt.amount, receipt.currency),
        "currency": receipt.currency,
        "status": receipt.status,
        "badge": receipt_badge(receipt.status).to_dict(),
        "subscription_tier_id": receipt.subscription_tier_id,
        "tier": _tier_dict(receipt.tier),
        "transaction_type": receipt.transaction_type,
        "receipt_image_url": receipt.receipt_image_url,
        "notes": receipt.notes,
        "submitted_at": isoformat_or_none(receipt.submitted_at),
        "reviewed_at": isoformat_or_none(receipt.reviewed_at),
        "created_at": isoformat_or_none(receipt.created_at),
    }


class PaymentHistoryService:
    """Lists a restaurant's invoices and receipts, newest first."""

    def __init__(self, repo: PaymentsRepository):
        self.repo = repo

    async def list_invoices(self, restaurant_id: str) -> list[dict]:
        try:
            rows = await self.repo.list_invoices(restaurant_id)
        except Exception as e:
            logger.error(f"Failed to load invoices for restaurant {restaurant_id}: {e}")
            raise DatabaseException(f"Failed to load invoices: {e}") from e
        return [invoice_to_dict(invoice_from_row(row)) for row in rows]

    async def get_invoice(self, restaurant_id: str, invoice_id: str) -> dict | None:
        try:
            row = await self.repo.get_invoice(invoice_id, restaurant_id)
        except Exception as e:
            logger.error(f"Failed to load invoice {invoice_id}: {e}")
            raise DatabaseException(f"Failed to load invoice: {e}") from e
        return invoice_to_dict(invoice_from_row(row)) if row else None

    async def list_receipts(self, restaurant_id: str) -> list[dict]:
        try:
            rows = await self.repo.list_receipts(restaurant_id)
        except Exception as e:
            logger.error(f"Failed to load receipts for restaurant {restaurant_id}: {e}")
            raise DatabaseException(f"Failed to load receipts: {e}") from e
        return [receipt_to_dict(receipt_from_row(row)) for row in rows]

    async def get_receipt(self, restaurant_id: str, receipt_id: str) -> dict | None:
        try:
            row = await self.repo.get_receipt(receipt_id, restaurant_id)
        except Exception as e:
            logger.error(f"Failed to load receipt {receipt_id}: {e}")
            raise DatabaseException(f"Failed to load receipt: {e}") from e
        return receipt_to_dict(receipt_from_row(row)) if row else None
