from typing import Literal, Optional

ValidationReason = Literal[
    "missing_field", "invalid_price", "invalid_category", "invalid_status"
]


class ShopError(Exception):
    """Base class for errors surfaced to the initiating UI action."""


class ValidationError(ShopError, ValueError):
    """
    Raised before any mutation when a required field is missing or malformed.
    `reason` is machine-readable, `field` names the offending input.
    """

    def __init__(
        self, reason: ValidationReason, field: Optional[str] = None, message: str = ""
    ) -> None:
        self.reason = reason
        self.field = field
        super().__init__(message or _default_message(reason, field))


class EmptyCartError(ShopError):
    """Checkout attempted with nothing in the cart."""


class PaymentFailedError(ShopError):
    """The mobile-money prompt was rejected; no order was created."""


def _default_message(reason: ValidationReason, field: Optional[str]) -> str:
    if reason == "missing_field":
        return f"Please fill in the {field or 'required'} field."
    if reason == "invalid_price":
        return "Price must be a positive whole number."
    if reason == "invalid_category":
        return "Unknown product category."
    return "Unknown order status."
