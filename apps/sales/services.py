"""
Checkout service: turns a confirmed cart into a recorded order.

The stock check, the stock decrement and the order insert happen in one
database transaction. Product rows are locked (SELECT ... FOR UPDATE, in
primary key order) before stock is read, so two terminals selling the last
unit of a product cannot both succeed. On any error the transaction rolls
back and nothing is written.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import F

from apps.core.models import User
from apps.inventory.models import Product

from .exceptions import InsufficientStockError, MissingEntityError
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


class OrderRecorder:
    """
    Records completed sales.

    Args:
        store: OrderStore that persists the order
        track_stock: When False, stock is neither checked nor decremented.
            Defaults to the POS_TRACK_STOCK setting.
    """

    def __init__(self, store, track_stock=None):
        self.store = store
        if track_stock is None:
            track_stock = getattr(settings, "POS_TRACK_STOCK", True)
        self.track_stock = track_stock

    def record(self, cart, cashier_id, amount_tendered):
        """
        Validate the cart, settle the payment and persist the order.

        Returns:
            The saved Order

        Raises:
            CheckoutValidationError: Empty cart, bad line or short payment
            InsufficientStockError: A line asks for more than is in stock
            MissingEntityError: The cashier or a product no longer exists
            DatabaseError: The database failed; the transaction was rolled back
        """
        settlement = cart.confirm(amount_tendered)

        with transaction.atomic():
            if self.track_stock:
                self._reserve_stock(cart.lines)

            cashier = User.objects.filter(pk=cashier_id).first()
            if cashier is None:
                raise MissingEntityError("Cashier", cashier_id)

            order = Order(
                cashier=cashier,
                cashier_username=cashier.username,
                subtotal=cart.subtotal(),
                discount=cart.discount,
                total=settlement.total,
                amount_paid=settlement.amount_tendered,
                change=settlement.change,
            )
            items = [
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    price=line.price,
                    quantity=line.quantity,
                    image_url=line.image_url,
                )
                for line in cart.lines
            ]
            order = self.store.save(order, items)

        logger.info(
            f"Order {order.id} recorded by {cashier.username}: "
            f"{len(items)} lines, total {order.total}, change {order.change}"
        )
        return order

    def _reserve_stock(self, lines):
        """Lock the cart's products, check availability and decrement stock."""
        product_ids = [line.product_id for line in lines]
        products = {
            str(product.pk): product
            for product in Product.objects.select_for_update()
            .filter(pk__in=product_ids)
            .order_by("pk")
        }

        for line in lines:
            product = products.get(str(line.product_id))
            if product is None:
                raise MissingEntityError("Product", line.name)
            if not product.tracks_stock():
                continue
            if not product.can_deduct_quantity(line.quantity):
                logger.warning(
                    f"Checkout rejected: {product.name} has {product.stock} in stock, "
                    f"{line.quantity} requested"
                )
                raise InsufficientStockError(line.name, product.stock, line.quantity)

            Product.objects.filter(pk=product.pk).update(stock=F("stock") - line.quantity)
