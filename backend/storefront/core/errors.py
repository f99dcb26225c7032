"""Exceptions raised by storefront services.

Every error carries a human readable ``message`` and the HTTP status the API
boundary answers with. Routers never build error payloads themselves; the
handler registered in ``storefront.main`` turns these into
``{"success": false, "message": ..., "code": ...}``.
"""
from typing import List, Optional


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationRequiredError(StorefrontError):
    status_code = 401
    code = "authentication_required"

    def __init__(self, message: str = "Login required."):
        super().__init__(message)


class ForbiddenError(StorefrontError):
    status_code = 403
    code = "forbidden"

    def __init__(self, message: str = "You do not have permission to do this."):
        super().__init__(message)


class NotFoundError(StorefrontError):
    status_code = 404
    code = "not_found"


class ValidationFailedError(StorefrontError):
    """A request that is well formed but breaks a business rule."""

    status_code = 400
    code = "validation_failed"


class ProductUnavailableError(ValidationFailedError):
    code = "product_unavailable"

    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"{product_name} is no longer available.")


class OutOfStockError(ValidationFailedError):
    code = "out_of_stock"

    def __init__(self, stock: int, in_cart: Optional[int] = None, product_name: Optional[str] = None):
        self.stock = stock
        self.in_cart = in_cart
        self.product_name = product_name
        subject = f"Insufficient stock for {product_name}" if product_name else "Insufficient stock"
        detail = f"in stock: {stock}"
        if in_cart is not None:
            detail = f"{detail}, in cart: {in_cart}"
        super().__init__(f"{subject} ({detail}).")


class OrderValidationError(ValidationFailedError):
    """Several cart lines failed checkout validation at once."""

    code = "order_validation_failed"

    def __init__(self, problems: List[ValidationFailedError]):
        self.problems = problems
        super().__init__(" ".join(p.message for p in problems))


class AmountMismatchError(ValidationFailedError):
    code = "amount_mismatch"

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__("The payment amount does not match the order total.")


class InvalidStatusTransitionError(ValidationFailedError):
    code = "invalid_status_transition"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        if current != "pending" and target == "confirmed":
            msg = "This order has already been processed."
        else:
            msg = f"Cannot change order status from {current} to {target}."
        super().__init__(msg)


class PaymentConfigurationError(StorefrontError):
    status_code = 500
    code = "payment_not_configured"

    def __init__(self, message: str = "Payment is not configured correctly."):
        super().__init__(message)


class PaymentGatewayError(StorefrontError):
    """The payment gateway rejected the request or could not be reached."""

    status_code = 502
    code = "payment_gateway_error"

    def __init__(self, message: str, gateway_code: Optional[str] = None, http_status: Optional[int] = None):
        self.gateway_code = gateway_code
        self.http_status = http_status
        super().__init__(message)


class PersistenceError(StorefrontError):
    status_code = 500
    code = "persistence_error"
