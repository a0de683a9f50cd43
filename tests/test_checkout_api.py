"""
Tests for the checkout and transaction history API.
"""

import uuid
from datetime import datetime, time, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone

import pytest
from rest_framework import status

from apps.inventory.models import Product
from apps.sales.models import Order
from apps.sales.serializers import DateRangeSerializer
from apps.sales.store import OrderStore


@pytest.mark.django_db
class TestCheckout:
    """POST /api/transactions/"""

    url = "/api/transactions/"

    def test_checkout_records_order(self, cashier_client, cashier_user, product, checkout_payload):
        response = cashier_client.post(
            self.url, checkout_payload((product, 2), amount_paid="50000"), format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert Decimal(data["subtotal"]) == Decimal("50000")
        assert Decimal(data["total"]) == Decimal("50000")
        assert Decimal(data["amountPaid"]) == Decimal("50000")
        assert Decimal(data["change"]) == Decimal("0")
        assert data["cashier"] == {"id": cashier_user.id, "username": "cashier", "role": "cashier"}
        assert data["items"] == [
            {
                "id": str(product.id),
                "name": "Fried Rice",
                "price": "25000.00",
                "quantity": 2,
                "imageUrl": "https://img.example.com/fried-rice.png",
            }
        ]
        assert data["timestamp"]

        product.refresh_from_db()
        assert product.stock == 8

    def test_explicit_cashier(self, admin_client, cashier_user, product, checkout_payload):
        payload = checkout_payload((product, 1), amount_paid="30000", cashier_id=cashier_user.id)

        response = admin_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["cashier"]["username"] == "cashier"
        assert Decimal(response.json()["change"]) == Decimal("5000")

    def test_discount_clamped_to_subtotal(self, cashier_client, category, checkout_payload):
        noodles = Product.objects.create(
            name="Noodles", price=Decimal("30000"), stock=5, category=category
        )

        response = cashier_client.post(
            self.url,
            checkout_payload((noodles, 1), amount_paid="0", discount="40000"),
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.json()["discount"]) == Decimal("30000")
        assert Decimal(response.json()["total"]) == Decimal("0")

    def test_conflicting_line_prices(self, cashier_client, product, checkout_payload):
        payload = checkout_payload((product, 1), amount_paid="50000")
        payload["items"].append({**payload["items"][0], "price": "1.00"})

        response = cashier_client.post(self.url, payload, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Conflicting prices for Fried Rice."
        product.refresh_from_db()
        assert product.stock == 10

    def test_short_payment(self, cashier_client, product, drink, checkout_payload):
        response = cashier_client.post(
            self.url,
            checkout_payload((product, 1), (drink, 1), amount_paid="20000", discount="5000"),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "less than the total" in response.json()["message"]
        assert Order.objects.count() == 0

    def test_insufficient_stock(self, cashier_client, product, checkout_payload):
        product.stock = 1
        product.save()

        response = cashier_client.post(
            self.url, checkout_payload((product, 2), amount_paid="50000"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"].startswith("Insufficient stock for Fried Rice")
        product.refresh_from_db()
        assert product.stock == 1

    def test_unknown_cashier(self, admin_client, product, checkout_payload):
        response = admin_client.post(
            self.url,
            checkout_payload((product, 1), amount_paid="25000", cashier_id=424242),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Cashier not found" in response.json()["message"]
        product.refresh_from_db()
        assert product.stock == 10

    def test_unknown_product(self, cashier_client, checkout_payload):
        ghost = Product(id=uuid.uuid4(), name="Ghost", price=Decimal("1000"), image_url="")

        response = cashier_client.post(
            self.url, checkout_payload((ghost, 1), amount_paid="1000"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Product not found: Ghost"

    def test_empty_cart(self, cashier_client):
        response = cashier_client.post(
            self.url, {"items": [], "amountPaid": "1000"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "items" in response.json()["errors"]

    def test_invalid_quantity(self, cashier_client, product, checkout_payload):
        response = cashier_client.post(
            self.url, checkout_payload((product, 0), amount_paid="0"), format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Order.objects.count() == 0

    def test_database_failure_returns_503(
        self, cashier_client, product, checkout_payload, monkeypatch
    ):
        def failing_save(self, order, items):
            raise DatabaseError("connection lost")

        monkeypatch.setattr(OrderStore, "save", failing_save)

        response = cashier_client.post(
            self.url, checkout_payload((product, 1), amount_paid="25000"), format="json"
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert "connection lost" not in response.json()["message"]
        product.refresh_from_db()
        assert product.stock == 10

    def test_requires_authentication(self, api_client, product, checkout_payload):
        response = api_client.post(
            self.url, checkout_payload((product, 1), amount_paid="25000"), format="json"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestTransactionHistory:
    """GET /api/transactions/ and /api/transactions/<id>/"""

    def _checkout(self, client, product, checkout_payload):
        response = client.post(
            "/api/transactions/",
            checkout_payload((product, 1), amount_paid="25000"),
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        return response.json()["id"]

    def test_admin_lists_transactions_newest_first(
        self, admin_client, cashier_client, product, checkout_payload
    ):
        first = self._checkout(cashier_client, product, checkout_payload)
        second = self._checkout(cashier_client, product, checkout_payload)
        now = timezone.now()
        Order.objects.filter(pk=first).update(created_at=now - timedelta(hours=2))
        Order.objects.filter(pk=second).update(created_at=now - timedelta(hours=1))

        response = admin_client.get(reverse("sales:transaction_list"))

        assert response.status_code == status.HTTP_200_OK
        assert [order["id"] for order in response.json()] == [second, first]

    def test_end_date_covers_whole_day(
        self, admin_client, cashier_client, product, checkout_payload
    ):
        order_id = self._checkout(cashier_client, product, checkout_payload)
        Order.objects.filter(pk=order_id).update(
            created_at=datetime(2024, 5, 3, 11, tzinfo=dt_timezone.utc)
        )

        response = admin_client.get(
            reverse("sales:transaction_list"), {"startDate": "2024-05-01", "endDate": "2024-05-03"}
        )

        assert [order["id"] for order in response.json()] == [order_id]

    def test_same_day_range(self, admin_client, cashier_client, product, checkout_payload):
        order_id = self._checkout(cashier_client, product, checkout_payload)
        Order.objects.filter(pk=order_id).update(
            created_at=datetime(2024, 5, 3, 18, 30, tzinfo=dt_timezone.utc)
        )

        response = admin_client.get(
            reverse("sales:transaction_list"), {"startDate": "2024-05-03", "endDate": "2024-05-03"}
        )

        assert [order["id"] for order in response.json()] == [order_id]

    def test_date_range_filter(self, admin_client, cashier_client, product, checkout_payload):
        self._checkout(cashier_client, product, checkout_payload)

        response = admin_client.get(
            reverse("sales:transaction_list"),
            {"startDate": "2001-01-01", "endDate": "2001-01-31"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_invalid_date(self, admin_client):
        response = admin_client.get(reverse("sales:transaction_list"), {"startDate": "yesterday"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cashier_cannot_list(self, cashier_client):
        response = cashier_client.get(reverse("sales:transaction_list"))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_cashier_reads_own_transaction(self, cashier_client, product, checkout_payload):
        order_id = self._checkout(cashier_client, product, checkout_payload)

        response = cashier_client.get(reverse("sales:transaction_detail", args=[order_id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == order_id

    def test_other_cashier_gets_404(
        self, cashier_client, product, checkout_payload, django_user_model
    ):
        order_id = self._checkout(cashier_client, product, checkout_payload)
        other = django_user_model.objects.create_user(username="other", pin="9999")
        cashier_client.force_authenticate(user=other)

        response = cashier_client.get(reverse("sales:transaction_detail", args=[order_id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCalculateTotals:
    """POST /api/pos/calculate-totals/"""

    def test_preview(self, cashier_client, product, drink, checkout_payload):
        payload = checkout_payload((product, 1), (drink, 1), amount_paid="0", discount="5000")

        response = cashier_client.post(
            reverse("sales:pos_calculate_totals"),
            {"items": payload["items"], "discount": payload["discount"]},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "subtotal": "33000.00",
            "discount": "5000.00",
            "total": "28000.00",
            "itemCount": 2,
            "quickAmounts": ["28000.00", "50000.00", "100000.00"],
        }
        assert Order.objects.count() == 0

    def test_conflicting_line_prices(self, cashier_client, product, checkout_payload):
        payload = checkout_payload((product, 1), amount_paid="0")
        payload["items"].append({**payload["items"][0], "price": "1.00"})

        response = cashier_client.post(
            reverse("sales:pos_calculate_totals"), {"items": payload["items"]}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Conflicting prices for Fried Rice."


class TestDateRangeSerializer:
    def test_bare_dates_span_whole_days(self):
        serializer = DateRangeSerializer(data={"startDate": "2024-05-01", "endDate": "2024-05-03"})

        assert serializer.is_valid(), serializer.errors
        start = timezone.localtime(serializer.validated_data["start"])
        end = timezone.localtime(serializer.validated_data["end"])
        assert (start.date().isoformat(), start.time()) == ("2024-05-01", time.min)
        assert (end.date().isoformat(), end.time()) == ("2024-05-03", time.max)

    def test_datetime_end_kept_as_given(self):
        serializer = DateRangeSerializer(
            data={"startDate": "2024-05-01", "endDate": "2024-05-03T10:15:00+00:00"}
        )

        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["end"] == datetime(2024, 5, 3, 10, 15, tzinfo=dt_timezone.utc)

    def test_garbage_rejected(self):
        serializer = DateRangeSerializer(data={"endDate": "someday"})

        assert not serializer.is_valid()
        assert "endDate" in serializer.errors
