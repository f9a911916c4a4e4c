"""Marketplace error taxonomy.

Validation problems are reported with Protean's ``ValidationError`` like the
rest of the domain. The classes below cover the remaining categories; each
carries the HTTP status it maps to and a message that is safe to show to the
user.
"""


class MarketplaceError(Exception):
    """Base class for domain errors surfaced to callers."""

    status_code = 500
    code = "internal"

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(MarketplaceError):
    status_code = 404
    code = "not_found"


class ForbiddenError(MarketplaceError):
    status_code = 403
    code = "forbidden"


class ConflictError(MarketplaceError):
    status_code = 409
    code = "conflict"


class InsufficientStockError(ConflictError):
    """Raised when a reservation would take a stock count below zero."""

    code = "insufficient_stock"

    def __init__(self, label: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for {label}. Available: {available}, requested: {requested}",
            item=label,
            available=available,
            requested=requested,
        )
        self.label = label
        self.available = available
        self.requested = requested


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"
