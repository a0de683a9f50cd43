"""
Serializers for the sales app.

- Checkout request (cart lines, cashier, cash tendered, discount)
- Recorded orders and their lines
- Date range query parameters shared with the reports
"""

from datetime import datetime, time, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from rest_framework import serializers

from .cart import Cart
from .models import Order, OrderItem


class CheckoutLineSerializer(serializers.Serializer):
    """A cart line as sent by the terminal."""

    id = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1)
    imageUrl = serializers.CharField(
        source="image_url", max_length=500, required=False, allow_blank=True, default=""
    )


class CheckoutRequestSerializer(serializers.Serializer):
    """
    Checkout request body.

    cashierId defaults to the authenticated user. The discount is a flat
    amount and is clamped into [0, subtotal] by the cart.
    """

    items = CheckoutLineSerializer(many=True, allow_empty=False)
    cashierId = serializers.IntegerField(source="cashier_id", required=False)
    amountPaid = serializers.DecimalField(
        source="amount_paid", max_digits=12, decimal_places=2, min_value=0
    )
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default=0
    )

    def build_cart(self):
        """Rebuild the cart from validated data."""
        lines = [
            {
                "product_id": line["id"],
                "name": line["name"],
                "price": line["price"],
                "quantity": line["quantity"],
                "image_url": line.get("image_url", ""),
            }
            for line in self.validated_data["items"]
        ]
        return Cart.from_lines(lines, discount=self.validated_data["discount"])


class CartPreviewSerializer(serializers.Serializer):
    """Body for the totals preview: cart lines plus an optional discount."""

    items = CheckoutLineSerializer(many=True, allow_empty=False)
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, default=0
    )

    def build_cart(self):
        lines = [
            {
                "product_id": line["id"],
                "name": line["name"],
                "price": line["price"],
                "quantity": line["quantity"],
            }
            for line in self.validated_data["items"]
        ]
        return Cart.from_lines(lines, discount=self.validated_data["discount"])


class OrderItemSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source="product_id", read_only=True)
    imageUrl = serializers.CharField(source="image_url", read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "name", "price", "quantity", "imageUrl"]


class OrderSerializer(serializers.ModelSerializer):
    """Recorded order as returned by checkout and the transaction history."""

    items = OrderItemSerializer(many=True, read_only=True)
    amountPaid = serializers.DecimalField(
        source="amount_paid", max_digits=12, decimal_places=2, read_only=True
    )
    cashier = serializers.SerializerMethodField()
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "items",
            "subtotal",
            "discount",
            "total",
            "amountPaid",
            "change",
            "cashier",
            "timestamp",
        ]

    def get_cashier(self, obj):
        """Cashier reference; falls back to the stored username if the account is gone."""
        if obj.cashier is None:
            return {"id": None, "username": obj.cashier_username, "role": None}
        return {
            "id": obj.cashier.id,
            "username": obj.cashier.username,
            "role": obj.cashier.role,
        }


class DateRangeSerializer(serializers.Serializer):
    """
    startDate/endDate query parameters.

    Accepts ISO dates or datetimes. A bare start date means the start of that
    day and a bare end date means the end of that day, both in the current
    time zone. Without parameters the range covers the last seven days.
    """

    DEFAULT_DAYS = 7

    startDate = serializers.CharField(required=False)
    endDate = serializers.CharField(required=False)

    def _parse(self, value, end_of_day):
        # parse_date only matches bare dates; parse_datetime also accepts them
        day = parse_date(value)
        if day is not None:
            moment = datetime.combine(day, time.max if end_of_day else time.min)
        else:
            moment = parse_datetime(value)
            if moment is None:
                raise serializers.ValidationError("Use an ISO date or datetime.")
        if timezone.is_naive(moment):
            moment = timezone.make_aware(moment)
        return moment

    def validate_startDate(self, value):
        try:
            return self._parse(value, end_of_day=False)
        except ValueError:
            raise serializers.ValidationError("Invalid start date.")

    def validate_endDate(self, value):
        try:
            return self._parse(value, end_of_day=True)
        except ValueError:
            raise serializers.ValidationError("Invalid end date.")

    def validate(self, attrs):
        end = attrs.get("endDate") or timezone.now()
        start = attrs.get("startDate")
        if start is None:
            start = timezone.localtime(end).replace(
                hour=0, minute=0, second=0, microsecond=0
            ) - timedelta(days=self.DEFAULT_DAYS - 1)
        if start > end:
            raise serializers.ValidationError("startDate must not be after endDate.")
        return {"start": start, "end": end}
