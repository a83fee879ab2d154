"""Domain errors raised by the store service layer.

Routers never build HTTP responses for these themselves; the app factory maps
every ``StoreError`` to ``{"detail": message}`` with the error's status code.
"""


class StoreError(Exception):
    """Base exception for store business-rule failures."""

    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StoreError):
    """Missing or malformed input, or an operation not allowed in this state."""

    status_code = 400


class AuthorizationError(StoreError):
    """Caller has no rights over the target resource."""

    status_code = 401


class ForbiddenError(StoreError):
    """Caller is known but may not change this resource."""

    status_code = 403


class NotFoundError(StoreError):
    """Referenced order/product/cart/review does not exist."""

    status_code = 404
