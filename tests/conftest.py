"""
Pytest configuration and fixtures for the point-of-sale backend.
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from apps.core.models import User
from apps.inventory.models import Category, Product
from apps.sales.cart import Cart
from apps.sales.services import OrderRecorder
from apps.sales.store import OrderStore


@pytest.fixture
def api_client():
    """
    Fixture for an unauthenticated Django REST framework API client.
    """
    return APIClient()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username="admin", role=User.ADMIN, pin="1234")


@pytest.fixture
def cashier_user(db):
    return User.objects.create_user(username="cashier", role=User.CASHIER, pin="0000")


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as an administrator."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def cashier_client(cashier_user):
    """API client authenticated as a cashier."""
    client = APIClient()
    client.force_authenticate(user=cashier_user)
    return client


@pytest.fixture
def category(db):
    return Category.objects.create(name="Food")


@pytest.fixture
def product(category):
    return Product.objects.create(
        name="Fried Rice",
        price=Decimal("25000.00"),
        stock=10,
        category=category,
        image_url="https://img.example.com/fried-rice.png",
    )


@pytest.fixture
def drink(category):
    return Product.objects.create(name="Iced Tea", price=Decimal("8000.00"), stock=50, category=category)


@pytest.fixture
def order_store():
    return OrderStore()


@pytest.fixture
def recorder(order_store):
    return OrderRecorder(store=order_store, track_stock=True)


@pytest.fixture
def make_cart():
    """
    Build a cart from (product, quantity) pairs with an optional discount.
    """

    def _make_cart(*lines, discount=Decimal("0.00")):
        cart = Cart()
        for product, quantity in lines:
            cart.add_item(product)
            cart.set_quantity(product.id, quantity)
        cart.set_discount(discount)
        return cart

    return _make_cart


@pytest.fixture
def checkout_payload():
    """Request body for POST /api/transactions/ from (product, quantity) pairs."""

    def _payload(*lines, amount_paid, discount="0.00", cashier_id=None):
        payload = {
            "items": [
                {
                    "id": str(product.id),
                    "name": product.name,
                    "price": str(product.price),
                    "quantity": quantity,
                    "imageUrl": product.image_url,
                }
                for product, quantity in lines
            ],
            "amountPaid": str(amount_paid),
            "discount": str(discount),
        }
        if cashier_id is not None:
            payload["cashierId"] = cashier_id
        return payload

    return _payload
