"""
Tests for the sales report, top products and CSV export endpoints.
"""

from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.urls import reverse

import pytest
from rest_framework import status

from apps.inventory.models import Product
from apps.sales.models import Order

MAY_RANGE = {"startDate": "2024-05-01", "endDate": "2024-05-03"}


@pytest.fixture
def sales(recorder, make_cart, cashier_user, product, drink):
    """Three orders over 1-3 May 2024, nothing on the 2nd."""
    plan = [
        (datetime(2024, 5, 1, 9, tzinfo=dt_timezone.utc), [(product, 1), (drink, 2)]),
        (datetime(2024, 5, 1, 15, tzinfo=dt_timezone.utc), [(drink, 1)]),
        (datetime(2024, 5, 3, 11, tzinfo=dt_timezone.utc), [(product, 2)]),
    ]
    orders = []
    for when, lines in plan:
        cart = make_cart(*lines)
        order = recorder.record(cart, cashier_user.id, cart.total())
        Order.objects.filter(pk=order.pk).update(created_at=when)
        orders.append(order)
    return orders


@pytest.mark.django_db
class TestSalesReport:
    def test_summary_and_chart(self, admin_client, sales):
        response = admin_client.get(reverse("reporting:sales_report"), MAY_RANGE)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert Decimal(str(data["totalSales"])) == Decimal("99000")
        assert data["transactions"] == 3
        assert [(row["date"], Decimal(str(row["sales"])), row["transactions"]) for row in data["chartData"]] == [
            ("2024-05-01", Decimal("49000"), 2),
            ("2024-05-02", Decimal("0"), 0),
            ("2024-05-03", Decimal("50000"), 1),
        ]

    def test_empty_range(self, admin_client):
        response = admin_client.get(
            reverse("reporting:sales_report"), {"startDate": "2024-01-01", "endDate": "2024-01-01"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert Decimal(str(data["totalSales"])) == Decimal("0")
        assert data["transactions"] == 0
        assert len(data["chartData"]) == 1

    def test_same_day_range_includes_afternoon_sales(self, admin_client, sales):
        response = admin_client.get(
            reverse("reporting:sales_report"), {"startDate": "2024-05-01", "endDate": "2024-05-01"}
        )

        data = response.json()
        assert Decimal(str(data["totalSales"])) == Decimal("49000")
        assert data["transactions"] == 2

    def test_start_after_end(self, admin_client):
        response = admin_client.get(
            reverse("reporting:sales_report"), {"startDate": "2024-05-03", "endDate": "2024-05-01"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cashier_forbidden(self, cashier_client):
        response = cashier_client.get(reverse("reporting:sales_report"), MAY_RANGE)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestTopProducts:
    def test_ranked_by_quantity(self, admin_client, sales, product, drink, category):
        response = admin_client.get(reverse("reporting:top_products"), MAY_RANGE)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [entry["product"]["name"] for entry in data] == ["Fried Rice", "Iced Tea"]
        assert [entry["quantity"] for entry in data] == [3, 3]

        rice = data[0]
        assert rice["product"]["id"] == str(product.id)
        assert rice["product"]["imageUrl"] == "https://img.example.com/fried-rice.png"
        assert rice["product"]["category"] == {"id": str(category.id), "name": "Food"}
        assert Decimal(str(rice["product"]["price"])) == Decimal("25000")
        assert Decimal(str(rice["revenue"])) == Decimal("75000")
        assert Decimal(str(data[1]["revenue"])) == Decimal("24000")

    def test_limit(self, admin_client, sales):
        response = admin_client.get(reverse("reporting:top_products"), {**MAY_RANGE, "limit": 1})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 1

    def test_invalid_limit(self, admin_client):
        response = admin_client.get(reverse("reporting:top_products"), {"limit": "many"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deleted_product_keeps_sale_name(self, admin_client, sales, product):
        Product.objects.filter(pk=product.pk).delete()

        response = admin_client.get(reverse("reporting:top_products"), MAY_RANGE)

        rice = response.json()[0]
        assert rice["product"]["name"] == "Fried Rice"
        assert rice["product"]["price"] is None
        assert rice["product"]["category"] is None


@pytest.mark.django_db
class TestSalesExport:
    def test_csv_download(self, admin_client, sales):
        response = admin_client.get(reverse("reporting:sales_report_export"), MAY_RANGE)

        assert response.status_code == status.HTTP_200_OK
        assert response["Content-Type"].startswith("text/csv")
        assert 'filename="sales_2024-05-01_2024-05-03.csv"' in response["Content-Disposition"]

        lines = response.content.decode().strip().splitlines()
        assert lines[0] == "date,sales,transactions"
        assert lines[1].startswith("2024-05-01,49000")
        assert len(lines) == 4
