"""Delivery rider entity model."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Rider(BaseModel):
    """Rider employed by a restaurant."""

    id: str | None = Field(None, description="Rider ID (auto-generated)")
    restaurant_id: str | None = Field(None, description="Restaurant the rider works for")
    name: str = Field(..., min_length=1, max_length=100, description="Rider name")
    phone: str = Field(..., description="Contact phone")
    email: str | None = Field(None, description="Optional email")
    is_active: bool = Field(True, description="Available for assignment")
    created_at: datetime | None = Field(None, description="Creation timestamp")

    class Config:
        """Pydantic config."""

        from_attributes = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Name must not be blank")
        return name

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        phone = (
            v.replace("+", "").replace("-", "").replace(" ", "").replace("(", "").replace(")", "")
        )
        if not phone.isdigit():
            raise ValueError("Phone must contain only digits")
        if len(phone) < 7 or len(phone) > 15:
            raise ValueError("Phone must be between 7 and 15 digits")
        return v.strip()

    @field_validator("email")
    @classmethod
    def empty_email_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def to_dict(self) -> dict:
        """Convert to dictionary for database storage."""
        return {
            "id": self.id,
            "restaurant_id": self.restaurant_id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
