"""Error taxonomy shared by the catalogue and ordering contexts.

Validation-style failures extend Protean's ``ValidationError`` and lookups
that miss extend ``ObjectNotFoundError`` so that callers already handling
Protean exceptions keep working. Each error carries one human-readable
``message`` that is safe to show to API clients.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorefrontError(Exception):
    """Base class for errors that are not Protean validation or lookup failures."""

    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ObjectNotFoundError):
    """Entity is missing, or exists but is outside the caller's visibility scope."""

    def __init__(self, message="Not found"):
        self.message = message
        super().__init__(message)


class EmptyCart(ValidationError):
    def __init__(self, message="Cart is empty"):
        self.message = message
        super().__init__({"cart": [message]})


class InsufficientStock(ValidationError):
    """Requested quantity exceeds the product's current stock."""

    def __init__(self, product_id=None, message=None):
        self.product_id = str(product_id) if product_id else None
        if message is None:
            message = f"Insufficient stock for product {product_id}" if product_id else "Insufficient stock"
        self.message = message
        super().__init__({"stock": [message]})


class Forbidden(StorefrontError):
    default_message = "Insufficient permissions"


class Unauthenticated(StorefrontError):
    default_message = "Authentication required"


class OrderCreationFailed(StorefrontError):
    default_message = "Failed to create order"


def error_message(exc) -> str:
    """Flatten an exception into the single string returned to API clients."""
    message = getattr(exc, "message", None)
    if message:
        return str(message)

    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = []
        for field, errors in messages.items():
            if not isinstance(errors, list | tuple):
                errors = [errors]
            for error in errors:
                error = str(error)
                # Protean's field messages are fragments ("is required")
                parts.append(error if error[:1].isupper() else f"{field} {error}")
        return "; ".join(parts)
    if messages:
        return str(messages)
    return str(exc)
