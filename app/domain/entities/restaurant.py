"""Restaurant entity model."""
from __future__ import annotations

from pydantic import BaseModel, Field


class Restaurant(BaseModel):
    """The venue an operator manages; only the fields the order desk reads."""

    id: str = Field(..., description="Restaurant ID")
    owner_id: str | None = Field(None, description="Owning user")
    slug: str | None = Field(None, description="URL slug")
    status: str | None = Field(None, description="Account status")
    is_payment_overdue: bool = Field(False, description="Subscription payment overdue")
    restaurant_currency: str = Field("USD", description="ISO currency code")

    class Config:
        """Pydantic config."""

        from_attributes = True
