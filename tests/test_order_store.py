"""
Tests for order store queries: date ranges, best sellers and daily totals.
"""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest

from apps.inventory.models import Product
from apps.sales.models import Order


def at(day, hour=12):
    """An aware datetime on 2024-05-<day> (UTC)."""
    return datetime(2024, 5, day, hour, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def record_at(recorder, make_cart, cashier_user):
    """Record a paid-in-full order and move its timestamp to ``when``."""

    def _record_at(when, *lines):
        cart = make_cart(*lines)
        order = recorder.record(cart, cashier_user.id, cart.total())
        Order.objects.filter(pk=order.pk).update(created_at=when)
        return order

    return _record_at


@pytest.fixture
def noodles(category):
    return Product.objects.create(name="Noodles", price=Decimal("22000.00"), stock=50, category=category)


@pytest.mark.django_db
class TestFindByDateRange:
    def test_newest_first_within_range(self, order_store, record_at, product):
        old = record_at(at(1), (product, 1))
        middle = record_at(at(2), (product, 1))
        newest = record_at(at(3), (product, 1))
        record_at(at(10), (product, 1))

        orders = list(order_store.find_by_date_range(at(1, 0), at(3, 23)))

        assert [order.pk for order in orders] == [newest.pk, middle.pk, old.pk]

    def test_range_bounds_are_inclusive(self, order_store, record_at, product):
        order = record_at(at(5, 9), (product, 1))

        assert list(order_store.find_by_date_range(at(5, 9), at(5, 9))) == [order]

    def test_empty_range(self, order_store, record_at, product):
        record_at(at(5), (product, 1))

        assert list(order_store.find_by_date_range(at(6), at(7))) == []


@pytest.mark.django_db
class TestAggregateTopItems:
    def test_ranked_by_quantity_with_revenue(self, order_store, record_at, product, drink, noodles):
        record_at(at(1), (product, 1), (drink, 2))
        record_at(at(2), (drink, 3), (noodles, 4))

        top = order_store.aggregate_top_items(at(1, 0), at(2, 23), limit=10)

        assert [(item.name, item.quantity) for item in top] == [
            ("Iced Tea", 5),
            ("Noodles", 4),
            ("Fried Rice", 1),
        ]
        assert top[0].revenue == Decimal("40000.00")
        assert top[0].product_id == drink.id

    def test_ties_keep_first_sold_order(self, order_store, record_at, product, drink, noodles):
        record_at(at(1, 9), (noodles, 2))
        record_at(at(1, 10), (product, 2))
        record_at(at(1, 11), (drink, 2))

        top = order_store.aggregate_top_items(at(1, 0), at(1, 23), limit=10)

        assert [item.name for item in top] == ["Noodles", "Fried Rice", "Iced Tea"]

    def test_limit(self, order_store, record_at, product, drink, noodles):
        record_at(at(1), (product, 3), (drink, 2), (noodles, 1))

        top = order_store.aggregate_top_items(at(1, 0), at(1, 23), limit=2)

        assert [item.name for item in top] == ["Fried Rice", "Iced Tea"]

    def test_default_limit_from_settings(
        self, order_store, record_at, product, drink, noodles, settings
    ):
        settings.POS_TOP_ITEMS_LIMIT = 1
        record_at(at(1), (product, 3), (drink, 2), (noodles, 1))

        top = order_store.aggregate_top_items(at(1, 0), at(1, 23))

        assert [item.name for item in top] == ["Fried Rice"]

    def test_name_from_first_sale_in_range(self, order_store, record_at, product):
        record_at(at(1), (product, 1))
        product.name = "Fried Rice Special"
        product.save()
        record_at(at(2), (product, 1))

        top = order_store.aggregate_top_items(at(1, 0), at(2, 23))

        assert len(top) == 1
        assert top[0].name == "Fried Rice"
        assert top[0].quantity == 2

    def test_orders_outside_range_ignored(self, order_store, record_at, product, drink):
        record_at(at(1), (product, 5))
        record_at(at(3), (drink, 1))

        top = order_store.aggregate_top_items(at(3, 0), at(3, 23))

        assert [item.name for item in top] == ["Iced Tea"]


@pytest.mark.django_db
class TestDailyTotals:
    def test_every_day_present_including_empty_days(self, order_store, record_at, product, drink):
        record_at(at(1, 8), (product, 1))
        record_at(at(1, 17), (drink, 1))
        record_at(at(3), (product, 2))

        days = order_store.aggregate_daily_totals(at(1, 0), at(3, 23))

        assert [(day.date.isoformat(), day.total, day.count) for day in days] == [
            ("2024-05-01", Decimal("33000.00"), 2),
            ("2024-05-02", Decimal("0.00"), 0),
            ("2024-05-03", Decimal("50000.00"), 1),
        ]

    def test_summarize(self, order_store, record_at, product, drink):
        record_at(at(1), (product, 1))
        record_at(at(2), (drink, 2))
        record_at(at(9), (drink, 2))

        summary = order_store.summarize(at(1, 0), at(2, 23))

        assert summary == {"total": Decimal("41000.00"), "count": 2}

    def test_summarize_empty_range(self, order_store):
        summary = order_store.summarize(at(1, 0), at(1, 0) + timedelta(days=1))

        assert summary == {"total": Decimal("0.00"), "count": 0}
