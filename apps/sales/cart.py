"""
In-memory cart, discount and cash settlement for the POS checkout.

A cart is transient working state: it is never persisted. Each line holds a
snapshot of the product (name, price, image) taken when it was added, so the
recorded order reflects what the cashier saw at the terminal.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from django.conf import settings

from .exceptions import CheckoutValidationError, InsufficientTenderError

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

DEFAULT_QUICK_TENDER_DENOMINATIONS = [20000, 50000, 100000]


def to_money(value):
    """Coerce a number or numeric string to a 2-place Decimal."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        raise CheckoutValidationError(f"Invalid amount: {value!r}")


class CartLine:
    """A product snapshot plus the quantity being bought."""

    def __init__(self, product_id, name, price, quantity=1, image_url=""):
        self.product_id = product_id
        self.name = name
        self.price = to_money(price)
        self.quantity = quantity
        self.image_url = image_url or ""

    def __repr__(self):
        return f"CartLine({self.name!r}, price={self.price}, quantity={self.quantity})"

    @property
    def line_id(self):
        return self.product_id

    @property
    def line_total(self):
        return self.price * self.quantity


class Settlement(NamedTuple):
    """Result of a successful cash payment."""

    total: Decimal
    amount_tendered: Decimal
    change: Decimal


def settle(total, amount_tendered):
    """
    Settle a single cash payment against a total.

    Raises:
        InsufficientTenderError: If the tendered amount is below the total
    """
    total = to_money(total)
    amount_tendered = to_money(amount_tendered)
    if amount_tendered < total:
        raise InsufficientTenderError(amount_tendered, total)
    return Settlement(total=total, amount_tendered=amount_tendered, change=amount_tendered - total)


def suggest_tender_amounts(total, denominations=None):
    """
    Quick cash amounts for the payment screen.

    Returns the exact total followed by each configured denomination that
    covers it, in ascending order and without duplicates.
    """
    total = to_money(total)
    if denominations is None:
        denominations = getattr(
            settings, "POS_QUICK_TENDER_DENOMINATIONS", DEFAULT_QUICK_TENDER_DENOMINATIONS
        )

    amounts = [total]
    for denomination in sorted(to_money(d) for d in denominations):
        if denomination > total and denomination not in amounts:
            amounts.append(denomination)
    return amounts


class Cart:
    """
    Cart aggregator for one checkout.

    Lines are keyed by product identity, not by name. The discount is a flat
    amount kept within [0, subtotal]; it is clamped again every time the
    subtotal changes.
    """

    def __init__(self):
        self._lines = {}
        self._discount = ZERO

    def __len__(self):
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines.values())

    @classmethod
    def from_lines(cls, lines, discount=ZERO):
        """
        Rebuild a cart from submitted line data.

        Each entry is a mapping with product_id, name, price, quantity and an
        optional image_url. Repeated products are merged; a repeated product
        submitted at two different prices raises CheckoutValidationError.
        """
        cart = cls()
        for data in lines:
            product_id = data["product_id"]
            existing = cart._lines.get(product_id)
            if existing is None:
                cart._lines[product_id] = CartLine(
                    product_id=product_id,
                    name=data["name"],
                    price=data["price"],
                    quantity=0,
                    image_url=data.get("image_url", ""),
                )
                existing = cart._lines[product_id]
            elif to_money(data["price"]) != existing.price:
                raise CheckoutValidationError(f"Conflicting prices for {existing.name}.")
            cart.set_quantity(product_id, existing.quantity + data["quantity"])
        cart.set_discount(discount)
        return cart

    @property
    def lines(self):
        return list(self._lines.values())

    @property
    def discount(self):
        return self._discount

    def is_empty(self):
        return not self._lines

    def item_count(self):
        """Total units across all lines."""
        return sum(line.quantity for line in self._lines.values())

    def add_item(self, product):
        """
        Add one unit of a product.

        A product already in the cart gets its quantity incremented; otherwise
        a new line is created from a snapshot of the product.
        """
        line = self._lines.get(product.id)
        if line is not None:
            line.quantity += 1
        else:
            self._lines[product.id] = CartLine(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=1,
                image_url=getattr(product, "image_url", ""),
            )
        self._reclamp_discount()
        return self._lines[product.id]

    def set_quantity(self, line_id, quantity):
        """Set a line's quantity; zero or less removes the line."""
        if line_id not in self._lines:
            raise KeyError(line_id)
        if quantity <= 0:
            self.remove(line_id)
            return
        self._lines[line_id].quantity = quantity
        self._reclamp_discount()

    def remove(self, line_id):
        self._lines.pop(line_id, None)
        self._reclamp_discount()

    def clear(self):
        """Empty the cart and drop any pending discount."""
        self._lines.clear()
        self._discount = ZERO

    def subtotal(self):
        return sum((line.line_total for line in self._lines.values()), ZERO)

    def set_discount(self, amount):
        """Set a flat discount, clamped into [0, subtotal]."""
        amount = to_money(amount)
        self._discount = min(max(amount, ZERO), self.subtotal())
        return self._discount

    def total(self):
        return self.subtotal() - self._discount

    def validate_for_checkout(self):
        """
        Raise CheckoutValidationError unless the cart can be checked out.
        """
        if self.is_empty():
            raise CheckoutValidationError("Cart is empty.")
        for line in self._lines.values():
            if line.quantity < 1:
                raise CheckoutValidationError(f"Invalid quantity for {line.name}.")
            if line.price < ZERO:
                raise CheckoutValidationError(f"Invalid price for {line.name}.")
        if self.total() < ZERO:
            raise CheckoutValidationError("Total cannot be negative.")

    def confirm(self, amount_tendered):
        """Validate the cart and settle a cash payment against its total."""
        self.validate_for_checkout()
        return settle(self.total(), amount_tendered)

    def _reclamp_discount(self):
        subtotal = self.subtotal()
        if self._discount > subtotal:
            self._discount = subtotal
