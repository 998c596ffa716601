from __future__ import annotations


class ValidationError(Exception):
    """Base class for recoverable input errors.

    The workflow stays on the current stage and no state is changed.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ItemValidationError(ValidationError):
    pass


class DeliveryWindowError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message, field="delivery_at")


class CartItemNotFoundError(LookupError):
    def __init__(self, item_id: str) -> None:
        super().__init__(f"Cart item not found: {item_id}")
        self.item_id = item_id
