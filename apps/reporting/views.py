"""
Report API views for shop administrators.

Date ranges come from the startDate/endDate query parameters; see
DateRangeSerializer for the accepted formats and the default range.
"""

import logging

from django.http import HttpResponse
from django.utils import timezone

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.permissions import IsAdminRole
from apps.sales.serializers import DateRangeSerializer
from apps.sales.store import get_order_store

from .services import ReportExportService, SalesReportService

logger = logging.getLogger(__name__)


def _date_range(request):
    serializer = DateRangeSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["start"], serializer.validated_data["end"]


@api_view(["GET"])
@permission_classes([IsAdminRole])
def sales_report(request):
    """
    Sales summary for a date range.

    Response:
    {
        "totalSales": 150000.0,
        "transactions": 4,
        "chartData": [{"date": "2024-05-01", "sales": 50000.0, "transactions": 2}, ...]
    }
    """
    start, end = _date_range(request)
    report = SalesReportService(get_order_store()).sales_report(start, end)
    return Response(report)


@api_view(["GET"])
@permission_classes([IsAdminRole])
def top_products(request):
    """
    Best-selling products for a date range.

    Query parameters: startDate, endDate, limit (default POS_TOP_ITEMS_LIMIT).
    """
    start, end = _date_range(request)

    limit = request.query_params.get("limit")
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            return Response(
                {"message": "limit must be an integer."}, status=status.HTTP_400_BAD_REQUEST
            )
        if limit < 1:
            return Response(
                {"message": "limit must be at least 1."}, status=status.HTTP_400_BAD_REQUEST
            )

    products = SalesReportService(get_order_store()).top_products(start, end, limit=limit)
    return Response(products)


@api_view(["GET"])
@permission_classes([IsAdminRole])
def sales_report_export(request):
    """Per-day sales for a date range as a CSV download."""
    start, end = _date_range(request)
    report = SalesReportService(get_order_store()).sales_report(start, end)

    content = ReportExportService().export_to_csv(report["chartData"])
    filename = (
        f"sales_{timezone.localdate(start).isoformat()}_{timezone.localdate(end).isoformat()}.csv"
    )
    logger.info(f"Sales report exported by {request.user.username}: {filename}")

    response = HttpResponse(content, content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
