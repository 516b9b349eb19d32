"""Order tracking token entity model."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from app.domain.order import TokenType


class TrackingToken(BaseModel):
    """Time-limited credential granting read access to one order."""

    id: str | None = Field(None, description="Token row ID")
    order_id: str = Field(..., description="Tracked order")
    token: str = Field(..., min_length=1, description="Opaque token string")
    token_type: TokenType = Field(..., description="RIDER or CUSTOMER")
    expires_at: datetime = Field(..., description="Expiry time")
    created_at: datetime | None = Field(None, description="Issue time")

    class Config:
        """Pydantic config."""

        from_attributes = True

    def is_expired(self, now: datetime | None = None) -> bool:
        moment = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at < moment
