"""
Order store: append-only persistence and reporting queries for orders.

One store is created when the sales app loads and handed to the checkout
service and the report views (see SalesConfig.ready).
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import NamedTuple

from django.apps import apps as django_apps
from django.conf import settings
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from .models import Order, OrderItem

logger = logging.getLogger(__name__)


class TopItem(NamedTuple):
    product_id: object
    name: str
    image_url: str
    quantity: int
    revenue: Decimal


class DailyTotal(NamedTuple):
    date: object
    total: Decimal
    count: int


class OrderStore:
    """Persists orders and answers date-range queries over them."""

    def save(self, order, items):
        """
        Append an order with its lines.

        Must be called inside the checkout transaction. Assigns the order id
        and timestamp and returns the saved order.
        """
        order.check_totals(items)
        order.save()
        for position, item in enumerate(items):
            item.order = order
            item.position = position
        OrderItem.objects.bulk_create(items)
        logger.debug(f"Stored order {order.id} with {len(items)} lines")
        return order

    def get(self, order_id):
        return Order.objects.prefetch_related("items").select_related("cashier").get(pk=order_id)

    def _in_range(self, start, end):
        return Order.objects.filter(created_at__gte=start, created_at__lte=end)

    def find_by_date_range(self, start, end):
        """Orders created within [start, end], newest first."""
        return (
            self._in_range(start, end)
            .select_related("cashier")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    def aggregate_top_items(self, start, end, limit=None):
        """
        Best sellers within [start, end].

        Lines are grouped by product. Groups are ranked by quantity sold,
        highest first; ties keep the order in which the product was first
        sold. The name and image are those of the first sale in the range.
        Returns at most ``limit`` items, POS_TOP_ITEMS_LIMIT by default.
        """
        if limit is None:
            limit = settings.POS_TOP_ITEMS_LIMIT
        items = (
            OrderItem.objects.filter(order__created_at__gte=start, order__created_at__lte=end)
            .order_by("order__created_at", "order_id", "position")
            .only("product_id", "name", "image_url", "price", "quantity")
        )

        groups = {}
        for item in items:
            group = groups.get(item.product_id)
            if group is None:
                groups[item.product_id] = {
                    "product_id": item.product_id,
                    "name": item.name,
                    "image_url": item.image_url,
                    "quantity": item.quantity,
                    "revenue": item.line_total,
                }
            else:
                group["quantity"] += item.quantity
                group["revenue"] += item.line_total

        ranked = sorted(groups.values(), key=lambda group: -group["quantity"])
        return [TopItem(**group) for group in ranked[:limit]]

    def aggregate_daily_totals(self, start, end):
        """
        Sales totals per calendar day in the current time zone.

        Every day in [start, end] is present, including days without sales.
        """
        rows = (
            self._in_range(start, end)
            .annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(total=Sum("total"), count=Count("id"))
            .order_by("day")
        )
        by_day = {row["day"]: row for row in rows}

        day = timezone.localtime(start).date()
        last_day = timezone.localtime(end).date()
        totals = []
        while day <= last_day:
            row = by_day.get(day)
            if row:
                totals.append(DailyTotal(date=day, total=row["total"], count=row["count"]))
            else:
                totals.append(DailyTotal(date=day, total=Decimal("0.00"), count=0))
            day += timedelta(days=1)
        return totals

    def summarize(self, start, end):
        """Total revenue and number of orders within [start, end]."""
        result = self._in_range(start, end).aggregate(total=Sum("total"), count=Count("id"))
        return {
            "total": result["total"] or Decimal("0.00"),
            "count": result["count"],
        }


def get_order_store():
    """The process-wide store created by SalesConfig.ready()."""
    return django_apps.get_app_config("sales").order_store
