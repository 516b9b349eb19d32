"""Delivery rider management for a restaurant."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from app.domain.entities import Rider
from app.infra.db.riders_repo import RidersRepository

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save rider"
DELETE_FAILED_MESSAGE = "Failed to delete rider"


@dataclass
class RiderResult:
    ok: bool
    error_key: str | None = None
    message: str | None = None
    rider: Rider | None = None


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0] if error.errors() else {}
    message = str(first.get("msg") or SAVE_FAILED_MESSAGE)
    return message.removeprefix("Value error, ")


class RiderService:
    def __init__(self, repo: RidersRepository):
        self.repo = repo

    async def list_riders(self, restaurant_id: str, *, active_only: bool = False) -> list[Rider]:
        rows = await self.repo.list_riders(restaurant_id, active_only=active_only)
        return [Rider.model_validate(row) for row in rows]

    async def get_rider(self, restaurant_id: str, rider_id: str) -> Rider | None:
        row = await self.repo.get_rider(rider_id, restaurant_id)
        return Rider.model_validate(row) if row else None

    async def require_rider(self, restaurant_id: str, rider_id: str) -> Rider:
        return Rider.model_validate(await self.repo.get_rider_or_raise(rider_id, restaurant_id))

    async def create_rider(
        self, restaurant_id: str, *, name: str, phone: str, email: str | None = None
    ) -> RiderResult:
        try:
            draft = Rider(restaurant_id=restaurant_id, name=name, phone=phone, email=email)
        except ValidationError as e:
            return RiderResult(False, "invalid", _validation_message(e))

        try:
            row = await self.repo.create_rider(restaurant_id, draft.name, draft.phone, draft.email)
        except Exception as e:
            logger.error(f"Failed to create rider for restaurant {restaurant_id}: {e}")
            return RiderResult(False, "db_error", SAVE_FAILED_MESSAGE)
        return RiderResult(True, rider=Rider.model_validate(row))

    async def update_rider(
        self,
        restaurant_id: str,
        rider_id: str,
        *,
        name: str,
        phone: str,
        email: str | None = None,
    ) -> RiderResult:
        try:
            draft = Rider(
                id=rider_id, restaurant_id=restaurant_id, name=name, phone=phone, email=email
            )
        except ValidationError as e:
            return RiderResult(False, "invalid", _validation_message(e))

        try:
            updated = await self.repo.update_rider(
                rider_id, restaurant_id, draft.name, draft.phone, draft.email
            )
        except Exception as e:
            logger.error(f"Failed to update rider {rider_id}: {e}")
            return RiderResult(False, "db_error", SAVE_FAILED_MESSAGE)
        if not updated:
            return RiderResult(False, "not_found", "Rider not found")
        return RiderResult(True, rider=await self.get_rider(restaurant_id, rider_id))

    async def toggle_active(self, restaurant_id: str, rider_id: str) -> RiderResult:
        rider = await self.get_rider(restaurant_id, rider_id)
        if rider is None:
            return RiderResult(False, "not_found", "Rider not found")
        try:
            await self.repo.set_active(rider_id, restaurant_id, not rider.is_active)
        except Exception as e:
            logger.error(f"Failed to toggle rider {rider_id}: {e}")
            return RiderResult(False, "db_error", SAVE_FAILED_MESSAGE)
        rider.is_active = not rider.is_active
        return RiderResult(True, rider=rider)

    async def delete_rider(self, restaurant_id: str, rider_id: str) -> RiderResult:
        try:
            deleted = await self.repo.delete_rider(rider_id, restaurant_id)
        except Exception as e:
            logger.error(f"Failed to delete rider {rider_id}: {e}")
            return RiderResult(False, "db_error", DELETE_FAILED_MESSAGE)
        if not deleted:
            return RiderResult(False, "not_found", "Rider not found")
        return RiderResult(True)
