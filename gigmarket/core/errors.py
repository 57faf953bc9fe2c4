"""Domain errors raised by marketplace services.

Each error carries the HTTP status it maps to and a machine-readable kind;
``gigmarket.main`` turns them into ``{"error": kind, "detail": message}``.
"""


class MarketplaceError(Exception):
    """Base exception for marketplace service errors."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Malformed or missing input."""

    status_code = 400
    kind = "validation_error"


class ForbiddenError(MarketplaceError):
    """Authenticated but not authorized for this entity."""

    status_code = 403
    kind = "forbidden"


class NotFoundError(MarketplaceError):
    """Entity does not exist."""

    status_code = 404
    kind = "not_found"


class ConflictError(MarketplaceError):
    """Operation conflicts with the entity's current state."""

    status_code = 400
    kind = "conflict"


class InvalidTransitionError(MarketplaceError):
    """Order status change not allowed from the current status."""

    status_code = 400
    kind = "invalid_transition"

    def __init__(self, current: str, attempted: str):
        super().__init__(
            f"Invalid status transition. Current status: {current}, "
            f"Attempted transition to: {attempted}"
        )
        self.current = current
        self.attempted = attempted
