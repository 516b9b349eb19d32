"""Order line item entity model."""
from __future__ import annotations

from pydantic import BaseModel, Field

from app.domain.order import OrderItemType


class OrderItem(BaseModel):
    """Line item owned by exactly one order."""

    id: str = Field(..., description="Item ID")
    order_id: str = Field(..., description="Owning order ID")
    item_name: str = Field(..., description="Name shown on the ticket")
    quantity: int = Field(..., gt=0, description="Ordered quantity")
    price: float = Field(..., ge=0, description="Unit price")
    item_type: OrderItemType = Field(OrderItemType.REGULAR, description="REGULAR or BUNDLE")

    class Config:
        """Pydantic config."""

        from_attributes = True
        use_enum_values = True

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def is_bundle(self) -> bool:
        return self.item_type == OrderItemType.BUNDLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "item_name": self.item_name,
            "quantity": self.quantity,
            "price": self.price,
            "item_type": self.item_type,
            "line_total": self.line_total,
            "is_bundle": self.is_bundle,
        }
