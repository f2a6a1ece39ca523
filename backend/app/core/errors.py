"""Typed business errors raised by the order and coupon services.

Every error carries a stable machine-readable ``code`` and a human ``message``.
The API layer renders them through a single exception handler registered in
``app.main``.
"""

from decimal import Decimal
from typing import Any
from uuid import UUID


class DomainError(Exception):
    """Base class for expected business-rule failures."""

    status_code = 400
    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"


class PreconditionFailedError(DomainError):
    status_code = 400
    code = "PRECONDITION_FAILED"


class ValidationFailedError(DomainError):
    status_code = 422
    code = "VALIDATION_FAILED"


class ConflictError(DomainError):
    status_code = 409
    code = "CONFLICT"


# --- NotFound family ---


class MerchantNotFound(NotFoundError):
    code = "MERCHANT_NOT_FOUND"

    def __init__(self, merchant_id: UUID):
        super().__init__("Merchant not found", {"merchant_id": str(merchant_id)})


class AddressNotFound(NotFoundError):
    code = "ADDRESS_NOT_FOUND"

    def __init__(self, address_id: UUID):
        super().__init__("Address not found", {"address_id": str(address_id)})


class OrderNotFound(NotFoundError):
    code = "ORDER_NOT_FOUND"

    def __init__(self, order_id: UUID):
        super().__init__("Order not found", {"order_id": str(order_id)})


class CouponNotFound(NotFoundError):
    code = "COUPON_NOT_FOUND"

    def __init__(self, coupon_ref: UUID | str):
        super().__init__("Coupon not found", {"coupon": str(coupon_ref)})


# --- PreconditionFailed family ---


class MerchantUnavailable(PreconditionFailedError):
    code = "MERCHANT_SUSPENDED"

    def __init__(self, merchant_id: UUID, status: str):
        super().__init__(
            "Merchant is not available",
            {"merchant_id": str(merchant_id), "status": status},
        )


class MerchantClosed(PreconditionFailedError):
    code = "MERCHANT_CLOSED"

    def __init__(self, merchant_id: UUID):
        super().__init__("Merchant is currently closed", {"merchant_id": str(merchant_id)})


class ProductUnavailable(PreconditionFailedError):
    code = "PRODUCT_UNAVAILABLE"

    def __init__(self, product_id: UUID, name: str | None = None):
        label = name or str(product_id)
        super().__init__(f"Product {label} is not available", {"product_id": str(product_id)})


class MinOrderAmountNotMet(PreconditionFailedError):
    code = "MIN_ORDER_AMOUNT_NOT_MET"

    def __init__(self, required: Decimal, actual: Decimal):
        super().__init__(
            f"Minimum order amount is {required}",
            {"required": str(required), "actual": str(actual)},
        )


class InvalidOrderStatus(PreconditionFailedError):
    code = "INVALID_ORDER_STATUS"

    def __init__(self, order_id: UUID, status: str):
        super().__init__(
            "Order cannot be cancelled in current status",
            {"order_id": str(order_id), "status": status},
        )


# --- ValidationFailed family ---


class EmptyOrder(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Order must contain at least one item")


class InvalidQuantity(ValidationFailedError):
    def __init__(self, product_id: UUID, quantity: int):
        super().__init__(
            "Quantity must be a positive integer",
            {"product_id": str(product_id), "quantity": quantity},
        )


class CouponCodeExists(ValidationFailedError):
    code = "COUPON_CODE_EXISTS"

    def __init__(self, code: str):
        super().__init__("Coupon code already exists", {"coupon_code": code})


class InvalidCouponDefinition(ValidationFailedError):
    code = "INVALID_COUPON_DEFINITION"

    def __init__(self, coupon_id: UUID, reason: str):
        super().__init__(reason, {"coupon_id": str(coupon_id)})


# --- Conflict family ---


class OrderNumberConflict(ConflictError):
    code = "ORDER_NUMBER_CONFLICT"

    def __init__(self, attempts: int):
        super().__init__(
            "Could not allocate a unique order number", {"attempts": attempts}
        )


class CouponUsageConflict(ConflictError):
    code = "COUPON_USAGE_LIMIT_REACHED"

    def __init__(self, coupon_id: UUID):
        super().__init__("Coupon usage limit reached", {"coupon_id": str(coupon_id)})


class CouponRedemptionConflict(ConflictError):
    code = "COUPON_ALREADY_USED"

    def __init__(self, coupon_id: UUID, user_id: UUID):
        super().__init__(
            "You have already used this coupon",
            {"coupon_id": str(coupon_id), "user_id": str(user_id)},
        )


class PricingInvariantViolation(Exception):
    """Payable amount came out negative; a discount was not clamped upstream."""
