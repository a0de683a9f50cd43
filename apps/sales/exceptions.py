"""
Checkout errors.

Every error aborts the checkout attempt with nothing written; none are
retried. The operator fixes the cart (or the input) and submits again.
"""


class CheckoutError(Exception):
    """Base class for errors that reject a checkout."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class CheckoutValidationError(CheckoutError):
    """The cart or payment input is invalid; rejected before any database work."""


class InsufficientTenderError(CheckoutValidationError):
    """The tendered cash does not cover the total."""

    def __init__(self, amount_tendered, total):
        super().__init__(
            f"Amount paid ({amount_tendered}) is less than the total ({total})."
        )
        self.amount_tendered = amount_tendered
        self.total = total


class InsufficientStockError(CheckoutError):
    """A cart line asks for more units than are currently in stock."""

    def __init__(self, product_name, available, requested):
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class MissingEntityError(CheckoutError):
    """A product or cashier referenced by the checkout no longer exists."""

    def __init__(self, entity, identifier):
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier
