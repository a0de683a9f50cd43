"""
Catalog models for the point-of-sale platform.

Products are what cashiers add to the cart. In stock-tracking deployments
each product carries a stock counter that only the order recorder
decrements (see apps.sales.services).
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Category(models.Model):
    """
    Product categories for organizing the catalog.

    Deleting a category orphans its products (their category becomes empty)
    rather than deleting them.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the category",
    )

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Category name (e.g., Food, Drinks, Snacks)",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_categories"
        ordering = ["name"]
        verbose_name = "Category"
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    Catalog item sold at the terminal.

    ``stock`` is optional: a NULL stock means the product is not
    stock-tracked and can always be sold.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name (e.g., 'Fried Rice Special')",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit selling price",
    )

    stock = models.IntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Units in stock (empty when stock is not tracked)",
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        help_text="Product category",
    )

    image_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Product image shown on the POS grid",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was added to the catalog",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product was last updated",
    )

    class Meta:
        db_table = "inventory_products"
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__isnull=True) | models.Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="product_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
        ]

    def __str__(self):
        return self.name

    def tracks_stock(self):
        """Check if this product has a stock counter."""
        return self.stock is not None

    def is_out_of_stock(self):
        """Check if a stock-tracked product has no units left."""
        return self.tracks_stock() and self.stock == 0

    def can_deduct_quantity(self, quantity):
        """Check if we can deduct the specified quantity."""
        return not self.tracks_stock() or self.stock >= quantity
