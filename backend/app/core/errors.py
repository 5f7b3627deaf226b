"""
Domain errors for the checkout flow

Raised by services and repositories when a business rule is violated.
The API layer renders them through the handlers registered in app.main,
using `kind` as the stable machine-readable error code.
"""


class AppError(Exception):
    """Base class for errors that map to a client-facing response"""

    status_code = 500
    kind = "InternalError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "detail": self.message}


# ----------------------------------------------------------------------------
# User-correctable errors
# ----------------------------------------------------------------------------

class ValidationError(AppError):
    status_code = 400
    kind = "ValidationError"


class AmountMismatch(ValidationError):
    """Declared amount differs from the server-recomputed total."""

    kind = "AmountMismatch"

    def __init__(self, declared: int, expected: int):
        super().__init__(f"Declared amount {declared} does not match computed amount {expected}")
        self.declared = declared
        self.expected = expected


class ItemNotFound(ValidationError):
    """A cart line references an unknown catalog item."""

    status_code = 404
    kind = "ItemNotFound"

    def __init__(self, item_ids):
        self.item_ids = sorted(item_ids)
        super().__init__(f"Catalog items not found: {', '.join(self.item_ids)}")


class UnsupportedCurrency(ValidationError):
    kind = "UnsupportedCurrency"

    def __init__(self, currency: str):
        super().__init__(f"Currency not supported: {currency}")
        self.currency = currency


class OrderNotPayable(ValidationError):
    """Fulfillment attempted on an order that has not been paid."""

    status_code = 409
    kind = "OrderNotPayable"


# ----------------------------------------------------------------------------
# Missing records
# ----------------------------------------------------------------------------

class NotFoundError(AppError):
    status_code = 404
    kind = "NotFound"


class UserNotFound(NotFoundError):
    kind = "UserNotFound"


class OrderNotFound(NotFoundError):
    kind = "OrderNotFound"


# ----------------------------------------------------------------------------
# Upstream failures (safe to retry by resubmitting)
# ----------------------------------------------------------------------------

class UpstreamError(AppError):
    status_code = 502
    kind = "UpstreamError"


class GatewayUnavailable(UpstreamError):
    kind = "GatewayUnavailable"


class Forbidden(AppError):
    status_code = 403
    kind = "Forbidden"
