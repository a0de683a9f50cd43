"""
Views for the POS checkout and transaction history.

- POST /api/transactions/ records a cash sale
- GET /api/transactions/ lists recorded sales for a date range
- GET /api/transactions/<id>/ returns one recorded sale
- POST /api/pos/calculate-totals/ previews cart totals and quick cash amounts
"""

import logging

from django.db import DatabaseError

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.permissions import CanProcessSales, IsAdminRole

from .cart import suggest_tender_amounts
from .exceptions import CheckoutError
from .models import Order
from .serializers import (
    CartPreviewSerializer,
    CheckoutRequestSerializer,
    DateRangeSerializer,
    OrderSerializer,
)
from .services import OrderRecorder
from .store import get_order_store

logger = logging.getLogger(__name__)


class TransactionListCreateView(APIView):
    """
    Checkout and transaction history.

    Checkout request body:
    {
        "items": [{"id": "uuid", "name": "...", "price": "25000.00", "quantity": 2, "imageUrl": "..."}],
        "cashierId": 1 (optional, defaults to the authenticated user),
        "amountPaid": "50000.00",
        "discount": "0.00" (optional, flat amount)
    }

    Responses: 201 with the recorded order, 400 {"message": ...} when the
    checkout is rejected, 503 when the database fails.
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [CanProcessSales()]
        return [IsAdminRole()]

    def get(self, request):
        range_serializer = DateRangeSerializer(data=request.query_params)
        range_serializer.is_valid(raise_exception=True)
        date_range = range_serializer.validated_data

        orders = get_order_store().find_by_date_range(date_range["start"], date_range["end"])
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"message": "Invalid checkout request.", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        cashier_id = serializer.validated_data.get("cashier_id", request.user.id)
        recorder = OrderRecorder(store=get_order_store())

        try:
            cart = serializer.build_cart()
            order = recorder.record(cart, cashier_id, serializer.validated_data["amount_paid"])
        except CheckoutError as e:
            logger.warning(f"Checkout rejected for user {request.user.id}: {e.message}")
            return Response({"message": e.message}, status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Checkout failed with a database error")
            return Response(
                {"message": "Checkout could not be completed. Please try again."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        order = get_order_store().get(order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class TransactionDetailView(APIView):
    """
    A single recorded sale.

    Administrators can read any sale; cashiers only their own.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        try:
            order = get_order_store().get(pk)
        except Order.DoesNotExist:
            return Response({"message": "Transaction not found."}, status=status.HTTP_404_NOT_FOUND)

        if not request.user.is_admin() and order.cashier_id != request.user.id:
            return Response({"message": "Transaction not found."}, status=status.HTTP_404_NOT_FOUND)

        return Response(OrderSerializer(order).data)


@api_view(["POST"])
@permission_classes([CanProcessSales])
def pos_calculate_totals(request):
    """
    Calculate cart totals without recording a sale.

    Request body: {"items": [...], "discount": "0.00"}

    Response:
    {
        "subtotal": "33000.00",
        "discount": "5000.00",
        "total": "28000.00",
        "itemCount": 3,
        "quickAmounts": ["28000.00", "50000.00", "100000.00"]
    }
    """
    serializer = CartPreviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"message": "Invalid cart.", "errors": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        cart = serializer.build_cart()
    except CheckoutError as e:
        return Response({"message": e.message}, status=status.HTTP_400_BAD_REQUEST)

    total = cart.total()
    return Response(
        {
            "subtotal": str(cart.subtotal()),
            "discount": str(cart.discount),
            "total": str(total),
            "itemCount": cart.item_count(),
            "quickAmounts": [str(amount) for amount in suggest_tender_amounts(total)],
        }
    )
