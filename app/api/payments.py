"""Read-only subscription payment history endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException

from app.api.context import get_context, get_restaurant
from app.core.exceptions import DatabaseException, InvalidStatusError

router = APIRouter(prefix="/api/admin/payments", tags=["admin-payments"])


@router.get("/invoices")
async def list_invoices(authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    try:
        invoices = await ctx.payment_history.list_invoices(restaurant.id)
    except DatabaseException as e:
        raise HTTPException(status_code=503, detail="Failed to load invoices") from e
    except InvalidStatusError as e:
        raise HTTPException(status_code=500, detail=e.message) from e
    return {"invoices": invoices, "total": len(invoices)}


@router.get("/invoices/{invoice_id}")
async def get_invoice(invoice_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    try:
        invoice = await ctx.payment_history.get_invoice(restaurant.id, invoice_id)
    except DatabaseException as e:
        raise HTTPException(status_code=503, detail="Failed to load invoice") from e
    except InvalidStatusError as e:
        raise HTTPException(status_code=500, detail=e.message) from e
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get("/receipts")
async def list_receipts(authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    try:
        receipts = await ctx.payment_history.list_receipts(restaurant.id)
    except DatabaseException as e:
        raise HTTPException(status_code=503, detail="Failed to load receipts") from e
    except InvalidStatusError as e:
        raise HTTPException(status_code=500, detail=e.message) from e
    return {"receipts": receipts, "total": len(receipts)}


@router.get("/receipts/{receipt_id}")
async def get_receipt(receipt_id: str, authorization: str = Header(None)):
    ctx = get_context()
    restaurant = await get_restaurant(authorization, ctx)
    try:
        receipt = await ctx.payment_history.get_receipt(restaurant.id, receipt_id)
    except DatabaseException as e:
        raise HTTPException(status_code=503, detail="Failed to load receipt") from e
    except InvalidStatusError as e:
        raise HTTPException(status_code=500, detail=e.message) from e
    if receipt is None:
        raise HTTPException(status_code=404, detail="Receipt not found")
    return receipt
