"""Custom exceptions for the order desk."""
from __future__ import annotations


class OrderDeskException(Exception):
    """Base exception for all order desk errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class DatabaseException(OrderDeskException):
    """Database-related errors."""

    pass


class RestaurantNotFoundException(OrderDeskException):
    """No restaurant is owned by the authenticated user."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"No restaurant found for owner {owner_id}")
        self.owner_id = owner_id


class RiderNotFoundException(OrderDeskException):
    """Rider not found in database."""

    def __init__(self, rider_id: str) -> None:
        super().__init__(f"Rider with ID {rider_id} not found")
        self.rider_id = rider_id


class InvalidStatusError(OrderDeskException, ValueError):
    """A status value outside the known enumeration."""

    def __init__(self, status: object, kind: str = "order") -> None:
        super().__init__(f"Unknown {kind} status: {status!r}")
        self.status = status
        self.kind = kind


class AuthorizationException(OrderDeskException):
    """Authorization/permission errors."""

    pass


class ConfigurationException(OrderDeskException, ValueError):
    """Invalid or missing settings."""

    pass
