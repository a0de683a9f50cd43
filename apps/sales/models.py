"""
Order models for the point-of-sale checkout.

An order is the immutable record of one completed cash sale:
- Line snapshots (name, price, image) taken from the cart at checkout time
- Subtotal, flat discount, total, amount paid and change
- The cashier who processed it, with the username kept alongside in case the
  account is later removed

Orders are append-only. Once written they are never updated or deleted.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import User


class ImmutableRecordError(ValueError):
    """Raised when code tries to change or delete a recorded order."""


class Order(models.Model):
    """
    A completed sale.

    Monetary invariants, checked before the first save:
    - subtotal equals the sum of price x quantity over the lines
    - 0 <= discount <= subtotal
    - total = subtotal - discount
    - amount_paid >= total and change = amount_paid - total
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the order",
    )

    cashier = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
        help_text="Cashier who processed the sale",
    )

    cashier_username = models.CharField(
        max_length=150,
        help_text="Cashier username at the time of sale",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of line totals before discount",
    )

    discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Flat discount applied to the whole order",
    )

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount due (subtotal - discount)",
    )

    # Payment details
    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cash tendered by the customer",
    )

    change = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Change returned to the customer",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the sale was recorded",
    )

    class Meta:
        db_table = "sales_orders"
        ordering = ["-created_at"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        indexes = [
            models.Index(fields=["cashier", "-created_at"], name="order_cashier_date_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.total}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Recorded orders cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Recorded orders cannot be deleted")

    def check_totals(self, items):
        """
        Verify the monetary invariants against the given line items.

        Raises:
            ValueError: If any invariant does not hold
        """
        subtotal = sum((item.line_total for item in items), Decimal("0.00"))
        if self.subtotal != subtotal:
            raise ValueError(f"Subtotal {self.subtotal} does not match lines ({subtotal})")
        if not Decimal("0.00") <= self.discount <= self.subtotal:
            raise ValueError(f"Discount {self.discount} is outside [0, {self.subtotal}]")
        if self.total != self.subtotal - self.discount:
            raise ValueError("Total must equal subtotal minus discount")
        if self.amount_paid < self.total:
            raise ValueError("Amount paid is less than the total")
        if self.change != self.amount_paid - self.total:
            raise ValueError("Change must equal amount paid minus total")

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items.all())


class OrderItem(models.Model):
    """
    One line of an order.

    product_id is a plain reference, not a foreign key: the line keeps its
    snapshot even after the product is edited or removed from the catalog.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Order this line belongs to",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Line order within the sale",
    )

    product_id = models.UUIDField(
        help_text="Catalog product that was sold",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name at time of sale",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Units sold",
    )

    image_url = models.CharField(
        max_length=500,
        blank=True,
        help_text="Product image at time of sale",
    )

    class Meta:
        db_table = "sales_order_items"
        ordering = ["order", "position"]
        verbose_name = "Order Item"
        verbose_name_plural = "Order Items"
        indexes = [
            models.Index(fields=["product_id"], name="orderitem_product_idx"),
        ]

    def __str__(self):
        return f"{self.name} x {self.quantity}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Recorded order lines cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Recorded order lines cannot be deleted")

    @property
    def line_total(self):
        return self.price * self.quantity
